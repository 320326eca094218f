"""
Play sound with both hands in front of a webcam.

The two hands are tracked every frame and their gestures switch the instrument
between four modes:

* both hands pinched (thumb on index): **AudioEqualizer**, the first hand's index
    finger sweeps the pitch left to right; a loaded sound file follows it in speed.
* only the index fingers raised: **VolumeControl**, the distance between the two
    index tips sets the volume.
* both hands open: **TotalLock**, nothing moves until the gesture changes.
* one hand open: **FullReset**, volume, pitch and speed go back to their defaults.

Without two hands in view nothing changes, and the display says so.

The decision logic (``hand_features``, ``modes``, ``mapping``, ``control``) is plain
Python and works on any ``LandmarkSnapshot``; camera, MediaPipe, pyo and OpenCV are
only needed by ``video_features``, ``audio``, ``display`` and ``script_utils``.
"""

from handsynth.config import Cfg, load_config
from handsynth.control import (
    AudioSource,
    ControlState,
    FrameResult,
    display_features,
    process_frame,
    select_audio_source,
)
from handsynth.hand_features import (
    GesturePredicates,
    LandmarkPoint,
    LandmarkSnapshot,
    MalformedLandmarksError,
    is_only_index_extended,
    is_open_palm,
    is_pinch,
    two_hand_predicates,
)
from handsynth.mapping import ParameterValues, RangeMapper, map_parameters
from handsynth.modes import Mode, ModeChange, next_mode, transition
