"""Utility functions for running handsynth: frame loop, keyboard, camera, cli."""

import logging
from functools import partial
from typing import Any, Callable, Dict, Optional, TypeVar, Union

import argh
import cv2

from handsynth.audio import AudioEngine, tone_synths
from handsynth.config import Cfg, load_config
from handsynth.control import (
    AudioSource,
    ControlState,
    process_frame,
    select_audio_source,
)
from handsynth.display import draw_on_screen as DFLT_DRAW_ON_SCREEN
from handsynth.hand_features import hand_features
from handsynth.modes import ModeChange
from handsynth.util import log_json_if_possible, return_none as do_nothing
from handsynth.video_features import HandTracker, snapshot_from_detection

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------------
# Object resolution
# -------------------------------------------------------------------------------

T = TypeVar('T')


def resolve_object(
    obj: Union[str, T],
    *,
    object_map: Dict[str, T],
    expected_type: type = None,
    error_message: str = None,
) -> T:
    """
    Resolves an object by either returning it directly if it's of the correct type,
    or looking it up in a mapping if it's a string.

    >>> resolve_object('a', object_map={'a': 1})
    1
    >>> resolve_object(2, object_map={'a': 1}, expected_type=int)
    2
    >>> resolve_object('b', object_map={'a': 1})
    Traceback (most recent call last):
      ...
    ValueError: Unknown object identifier: b. Available: ['a']

    Raises:
        TypeError: If obj is not a string or of the expected type
        ValueError: If obj is a string but is not found in object_map.
    """
    if isinstance(obj, str):
        if obj in object_map:
            resolved_obj = object_map[obj]
        else:
            msg = error_message or (
                f"Unknown object identifier: {obj}. Available: {sorted(object_map)}"
            )
            raise ValueError(msg)
    elif expected_type is None or isinstance(obj, expected_type):
        resolved_obj = obj
    else:
        msg = error_message or f"Expected type {expected_type}, got {type(obj)}"
        raise TypeError(msg)

    return resolved_obj


resolve_tone_synth = partial(resolve_object, object_map=tone_synths)


# -------------------------------------------------------------------------------
# Keyboard handling functions
# -------------------------------------------------------------------------------

ESCAPE_KEY_ASCII = 27
BREAK_KEYS = {ESCAPE_KEY_ASCII, ord('q')}


class KeyboardBreakSignal(Exception):
    """Exception raised when a break key is pressed."""


def read_keyboard(wait_time: int = 5) -> int:
    """
    Read keyboard input with the specified wait time (milliseconds).

    Returns:
        The key code or 0 if no key was pressed
    """
    return cv2.waitKey(wait_time) & 0xFF


def check_break_key(key_code: int) -> int:
    """
    Raises:
        KeyboardBreakSignal: If a key that signals program termination is pressed
    """
    if key_code in BREAK_KEYS:
        raise KeyboardBreakSignal(f"Break key pressed: {key_code}")
    return key_code


# -------------------------------------------------------------------------------
# Camera handling functions
# -------------------------------------------------------------------------------


class CameraReadError(Exception):
    """Exception raised when camera read fails."""


def open_camera(config: Cfg) -> cv2.VideoCapture:
    cap = cv2.VideoCapture(config.camera.index)
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, config.camera.width)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, config.camera.height)
    if not cap.isOpened():
        raise CameraReadError(f"Failed to open camera {config.camera.index}")
    return cap


def read_camera(cap: cv2.VideoCapture, *, flip: bool = True) -> Any:
    """
    Read a frame from the camera, mirrored by default.

    Raises:
        CameraReadError: If the camera read operation fails
    """
    success, img = cap.read()
    if not success:
        raise CameraReadError("Failed to read from camera")
    return cv2.flip(img, 1) if flip else img


# -------------------------------------------------------------------------------
# Main run function
# -------------------------------------------------------------------------------

DFLT_TONE_SYNTH_NAME = 'sine_synth'
DFLT_RECORDING_PATH = 'handsynth_recording.wav'


def log_mode_change(mode_change: ModeChange):
    logger.info("Now in %s mode (was %s)", mode_change.current, mode_change.previous)


def run_handsynth(
    *,
    config: Optional[Cfg] = None,
    tone_synth: Union[str, Callable] = DFLT_TONE_SYNTH_NAME,
    sound_file: Optional[str] = None,
    log_hand_features: Optional[Callable] = None,
    log_audio_features: Optional[Callable] = None,
    on_mode_change: Optional[Callable] = log_mode_change,
    save_recording: Union[str, bool] = False,
    draw_on_screen: Optional[Callable] = DFLT_DRAW_ON_SCREEN,
):
    """
    Run the hand gesture synth.

    Args:
        config: Settings (defaults if None)
        tone_synth: Tone synthesizer function or name (see ``tone_synths``)
        sound_file: Sound file to play back instead of the tone
        log_hand_features: Function to log hand features (or None to disable)
        log_audio_features: Function to log the knobs sent to the synth (or None)
        on_mode_change: Called with the ``ModeChange`` when the mode changes
        save_recording: Filename to save recording, True for default name, or False
        draw_on_screen: Function drawing the overlay (or None to skip)
    """
    config = config or load_config()
    tone_synth = resolve_tone_synth(tone_synth)

    log_audio_features = log_audio_features or do_nothing
    on_mode_change = on_mode_change or do_nothing

    state = ControlState.initial(config)
    if sound_file is not None:
        select_audio_source(state, AudioSource.FILE)

    tracker = cap = None
    try:
        tracker = HandTracker.from_config(config.tracker)
        cap = open_camera(config)
        engine = AudioEngine(tone_synth, sound_file=sound_file)
        with engine:
            try:
                while cap.isOpened():
                    try:
                        check_break_key(read_keyboard())

                        img = read_camera(cap, flip=config.camera.flip_horizontal)

                        hand_detection = tracker.find_hands(img)
                        snapshot = snapshot_from_detection(hand_detection)
                        if log_hand_features:
                            log_hand_features(
                                hand_features(
                                    snapshot,
                                    pinch_threshold=config.gestures.pinch_threshold,
                                )
                            )

                        result = process_frame(snapshot, state, config)
                        if result.mode_change is not None:
                            on_mode_change(result.mode_change)

                        changed_knobs = engine.apply(state)
                        if changed_knobs:
                            log_audio_features(changed_knobs)

                        if draw_on_screen:
                            img = draw_on_screen(
                                img,
                                state,
                                result,
                                tracker=tracker,
                                hand_detection=hand_detection,
                                draw_landmarks=config.display.show_landmarks,
                                draw_volume=config.display.show_volume_bar,
                            )

                        cv2.imshow(config.display.window_name, img)

                    except (CameraReadError, KeyboardBreakSignal) as e:
                        logger.info("Stopping: %s", e)
                        break

            finally:
                if save_recording:
                    if isinstance(save_recording, str):
                        output_path = save_recording
                    else:
                        output_path = DFLT_RECORDING_PATH
                    engine.save_recording(output_path)
    finally:
        if tracker is not None:
            tracker.close()
        if cap is not None:
            cap.release()
        cv2.destroyAllWindows()

    return state


def handsynth_cli(
    *,
    config: Optional[str] = None,
    tone_synth: str = DFLT_TONE_SYNTH_NAME,
    sound_file: Optional[str] = None,
    # Logging options
    log_level: str = 'INFO',
    log_hand_features: bool = False,
    log_audio_features: bool = False,
    # Recording options
    save_recording: Optional[str] = None,
    # List available components
    list_synths: bool = False,
):
    """
    Run the hand gesture synth with the specified parameters.

    Args:
        config: Path to a YAML config file (defaults are used if omitted)
        tone_synth: Name of the tone synthesizer function
        sound_file: Sound file to play back, its speed following the pitch
        log_level: Logging level name
        log_hand_features: Whether to log hand features every frame
        log_audio_features: Whether to log the synth knobs when they change
        save_recording: Filename to render the session to (no recording if omitted)
        list_synths: List available tone synthesizer functions and exit
    """
    logging.basicConfig(
        level=log_level.upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if list_synths:
        print("Available tone synthesizer functions:")
        for name in sorted(tone_synths):
            print(f"  - {name}")
        return

    run_handsynth(
        config=load_config(config),
        tone_synth=tone_synth,
        sound_file=sound_file,
        log_hand_features=log_json_if_possible if log_hand_features else None,
        log_audio_features=log_json_if_possible if log_audio_features else None,
        save_recording=save_recording or False,
    )


def main():
    argh.dispatch_command(handsynth_cli)
