"""
The control state and the per-frame pipeline that updates it.

One ``ControlState`` lives for the whole session. The frame loop hands each
``LandmarkSnapshot`` to ``process_frame``, which is the only writer of the state;
the audio engine and the display read it once ``process_frame`` has returned.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Tuple

from handsynth.config import Cfg
from handsynth.hand_features import LandmarkSnapshot, two_hand_predicates
from handsynth.mapping import ParameterValues, map_parameters
from handsynth.modes import Mode, ModeChange, transition
from handsynth.util import HandLandmark, format_float, format_hz, format_percent

logger = logging.getLogger(__name__)

NO_SIGNAL_TEXT = "No signal: show both hands"


class AudioSource(str, Enum):
    """Which sound the audio engine should make audible."""

    OSCILLATOR = 'oscillator'
    FILE = 'file'

    def __str__(self):
        return self.value


@dataclass
class ControlState:
    mode: Mode = Mode.AUDIO_EQUALIZER
    previous_mode: Optional[Mode] = None
    volume: float = 0.5
    frequency: float = 440.0
    playback_rate: float = 1.0
    audio_source: AudioSource = AudioSource.OSCILLATOR
    has_signal: bool = False
    frame_count: int = 0

    @classmethod
    def initial(cls, config: Cfg = None) -> 'ControlState':
        config = config or Cfg()
        c = config.control
        return cls(
            mode=Mode(c.initial_mode),
            volume=c.initial_volume,
            frequency=c.initial_frequency,
            playback_rate=c.initial_playback_rate,
        )

    @property
    def parameters(self) -> ParameterValues:
        return ParameterValues(self.volume, self.frequency, self.playback_rate)

    def commit(self, values: ParameterValues):
        self.volume, self.frequency, self.playback_rate = values


Segment = Tuple[Tuple[float, float], Tuple[float, float]]


class FrameResult(NamedTuple):
    """What one call to ``process_frame`` did."""

    parameters: ParameterValues
    has_signal: bool
    mode_change: Optional[ModeChange] = None
    index_line: Optional[Segment] = None  # normalized, drawn in VolumeControl only


def process_frame(
    snapshot: LandmarkSnapshot, state: ControlState, config: Cfg = None
) -> FrameResult:
    """
    Run gesture classification, mode transition and parameter mapping on one frame.

    The snapshot is checked first: malformed landmarks raise
    ``MalformedLandmarksError``, and truncated hands count as missing. A snapshot
    without exactly two hands leaves the state as is, except for the
    ``has_signal`` flag.

    Args:
        snapshot: The hands of this frame
        state: The session's control state, updated in place
        config: Settings (defaults if None)

    Returns:
        A ``FrameResult`` describing the committed values and any mode change
    """
    config = config or Cfg()
    state.frame_count += 1
    snapshot = snapshot.validated()

    if snapshot.n_hands != config.tracker.max_num_hands:
        if state.has_signal:
            logger.debug("Lost signal: %d hand(s) in frame", snapshot.n_hands)
        state.has_signal = False
        return FrameResult(parameters=state.parameters, has_signal=False)

    hand1, hand2 = snapshot.hands
    predicates = two_hand_predicates(
        hand1, hand2, pinch_threshold=config.gestures.pinch_threshold
    )
    mode_change = transition(state, predicates)
    values = map_parameters(state.mode, snapshot, state.parameters, config.mapping)

    state.commit(values)
    state.has_signal = True

    index_line = None
    if state.mode == Mode.VOLUME_CONTROL:
        tip1 = hand1[HandLandmark.INDEX_FINGER_TIP]
        tip2 = hand2[HandLandmark.INDEX_FINGER_TIP]
        index_line = ((tip1.x, tip1.y), (tip2.x, tip2.y))

    return FrameResult(
        parameters=values,
        has_signal=True,
        mode_change=mode_change,
        index_line=index_line,
    )


def select_audio_source(state: ControlState, source) -> bool:
    """
    Record which audio source should be audible.

    The audio engine decides how to move from one source to the other.

    Returns:
        True if the selection changed
    """
    source = AudioSource(source)
    if source == state.audio_source:
        return False
    logger.info("Audio source: %s -> %s", state.audio_source, source)
    state.audio_source = source
    return True


def display_features(state: ControlState) -> dict:
    """
    The text the display shows for the committed state, as an ordered dict.

    >>> display_features(ControlState(has_signal=True))  # doctest: +NORMALIZE_WHITESPACE
    {'Mode': 'AudioEqualizer',
     'Info': 'Move your first hand left/right to change the pitch',
     'Volume': '50%', 'Frequency': '440.0 Hz', 'Speed': '1.00x'}
    """
    features = {
        'Mode': str(state.mode),
        'Info': state.mode.description,
    }
    if state.mode == Mode.TOTAL_LOCK:
        features['Volume'] = f"{format_percent(state.volume)} (locked)"
    else:
        features['Volume'] = format_percent(state.volume)
    features['Frequency'] = format_hz(state.frequency)
    features['Speed'] = f"{format_float(state.playback_rate, 2)}x"
    if state.audio_source == AudioSource.FILE:
        features['Source'] = str(state.audio_source)
    if not state.has_signal:
        features['Status'] = NO_SIGNAL_TEXT
    return features
