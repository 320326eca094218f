"""Audio synthesis and playback driven by the control state."""

import logging
import os
from typing import Callable, Dict, Optional

from hum import Synth
from hum.pyo_util import add_default_dials
from pyo import Adsr, SfPlayer, Sine

from handsynth.control import AudioSource, ControlState

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------------
# Tone synthesizers
# -------------------------------------------------------------------------------


def sine_synth(freq=440, volume=0.5):
    """A basic sine wave synthesizer."""
    return Sine(freq=freq, mul=volume)


def theremin_synth(
    freq=440,
    volume=0.5,
    attack=0.01,
    release=0.1,
    vibrato_rate=5,
    vibrato_depth=5,
):
    """
    Emulates a classic theremin sound: a sine with vibrato under an envelope.

    Parameters:
    - freq (float): Base frequency in Hz.
    - volume (float): Output volume (0 to 1).
    - attack (float): Attack time in seconds.
    - release (float): Release time in seconds.
    - vibrato_rate (float): Vibrato frequency in Hz.
    - vibrato_depth (float): Vibrato depth in Hz.
    """
    vibrato = Sine(freq=vibrato_rate, mul=vibrato_depth)
    env = Adsr(
        attack=attack, decay=0.1, sustain=0.8, release=release, dur=0, mul=volume
    )
    env.play()
    return Sine(freq=freq + vibrato, mul=env)


tone_synths: Dict[str, Callable] = {
    'sine_synth': sine_synth,
    'theremin_synth': theremin_synth,
}

DFLT_TONE_SYNTH = sine_synth


def mixed_source_synth_func(
    tone_synth: Callable = DFLT_TONE_SYNTH, sound_file: Optional[str] = None
):
    """
    Make a synth function that mixes a tone and (optionally) a looping sound file.

    The returned function's ``source_mix`` dial crossfades between the two sources
    (0: tone only, 1: file only), so switching sources never stops either of them.
    ``playback_rate`` is the file's speed.
    """
    if sound_file is not None and not os.path.isfile(sound_file):
        raise FileNotFoundError(f"Sound file not found: {sound_file}")

    @add_default_dials('freq volume playback_rate source_mix')
    def mixed_source_synth(freq=440, volume=0.5, playback_rate=1.0, source_mix=0.0):
        tone = tone_synth(freq=freq, volume=volume * (1 - source_mix))
        if sound_file is None:
            return tone
        player = SfPlayer(
            sound_file, speed=playback_rate, loop=True, mul=volume * source_mix
        )
        return tone + player

    return mixed_source_synth


# -------------------------------------------------------------------------------
# Audio engine
# -------------------------------------------------------------------------------


def knobs_from_state(state: ControlState, *, has_sound_file: bool = False) -> dict:
    """
    The synth knob values for the committed state.

    The file source is only selectable when there is a file to play.
    """
    use_file = has_sound_file and state.audio_source == AudioSource.FILE
    return {
        'freq': float(state.frequency),
        'volume': float(state.volume),
        'playback_rate': float(state.playback_rate),
        'source_mix': 1.0 if use_file else 0.0,
    }


class AudioEngine:
    """
    Applies the control state to a pyo synth (through ``hum.Synth``).

    Only knobs whose value changed since the last frame are sent.
    """

    def __init__(
        self,
        tone_synth: Callable = DFLT_TONE_SYNTH,
        *,
        sound_file: Optional[str] = None,
        nchnls: int = 2,
    ):
        self.sound_file = sound_file
        self.synth = Synth(mixed_source_synth_func(tone_synth, sound_file), nchnls=nchnls)
        self._last_knobs = {}
        logger.info(
            "Using tone synth %s with knobs %s",
            getattr(tone_synth, '__name__', tone_synth),
            list(self.synth.knobs),
        )

    def apply(self, state: ControlState) -> dict:
        """Send the knobs that changed. Returns them."""
        knobs = knobs_from_state(state, has_sound_file=self.sound_file is not None)
        changed = {k: v for k, v in knobs.items() if self._last_knobs.get(k) != v}
        if changed:
            self.synth(**changed)
            self._last_knobs.update(changed)
        return changed

    def save_recording(self, output_path: str):
        """Stop recording the control events and render them to a WAV file."""
        self.synth.stop_recording()
        recording = self.synth.get_recording()
        logger.info("Recorded %d control events", len(recording))
        self.synth.render_events(output_filepath=output_path)
        logger.info("Saved audio recording to %s", output_path)

    def __enter__(self):
        self.synth.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb):
        return self.synth.__exit__(exc_type, exc, tb)
