"""
Configuration management for handsynth.

Every setting has a default, so ``load_config()`` with no path gives a working
configuration. A YAML file only needs to contain the keys it overrides.
"""

import logging
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from handsynth.modes import Mode
from handsynth.util import data_files

logger = logging.getLogger(__name__)

DFLT_CONFIG_PATH = data_files / 'config.default.yaml'

Range = Tuple[float, float]


@dataclass
class CameraConfig:
    """Camera configuration settings."""

    index: int = 0
    width: int = 800
    height: int = 480
    flip_horizontal: bool = True


@dataclass
class TrackerConfig:
    """MediaPipe Hands configuration settings."""

    max_num_hands: int = 2
    model_complexity: int = 1
    min_detection_confidence: float = 0.7
    min_tracking_confidence: float = 0.7


@dataclass
class GestureConfig:
    """Gesture classification thresholds (normalized landmark space)."""

    pinch_threshold: float = 0.1


@dataclass
class MappingConfig:
    """Gesture to audio parameter mapping."""

    volume_distance_range: Range = (0.2, 0.8)
    frequency_band: Range = (220.0, 660.0)
    base_frequency: float = 440.0
    reset_volume: float = 0.75
    reset_frequency: float = 440.0
    reset_playback_rate: float = 1.0


@dataclass
class ControlConfig:
    """Initial values of the control state."""

    initial_mode: str = 'AudioEqualizer'
    initial_volume: float = 0.5
    initial_frequency: float = 440.0
    initial_playback_rate: float = 1.0


@dataclass
class DisplayConfig:
    """Display configuration settings."""

    window_name: str = 'Hand Synth'
    show_landmarks: bool = True
    show_volume_bar: bool = True


@dataclass
class Cfg:
    """Main configuration class."""

    camera: CameraConfig = field(default_factory=CameraConfig)
    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    mapping: MappingConfig = field(default_factory=MappingConfig)
    control: ControlConfig = field(default_factory=ControlConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def validate(self) -> 'Cfg':
        """Raise ``ValueError`` if any setting breaks an invariant, return self otherwise."""
        if self.tracker.max_num_hands != 2:
            raise ValueError(
                f"max_num_hands must be 2, got {self.tracker.max_num_hands}"
            )
        for name in ('min_detection_confidence', 'min_tracking_confidence'):
            value = getattr(self.tracker, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if self.gestures.pinch_threshold <= 0:
            raise ValueError(
                f"pinch_threshold must be positive, got {self.gestures.pinch_threshold}"
            )

        m = self.mapping
        lo, hi = m.volume_distance_range
        if not 0 <= lo < hi:
            raise ValueError(f"Invalid volume_distance_range: {m.volume_distance_range}")
        lo, hi = m.frequency_band
        if not 0 < lo < hi:
            raise ValueError(f"Invalid frequency_band: {m.frequency_band}")
        if m.base_frequency <= 0:
            raise ValueError(f"base_frequency must be positive, got {m.base_frequency}")
        _check_audio_values('reset', m.reset_volume, m.reset_frequency, m.reset_playback_rate)

        c = self.control
        try:
            Mode(c.initial_mode)
        except ValueError:
            raise ValueError(
                f"Unknown initial_mode {c.initial_mode!r}. "
                f"Available: {[mode.value for mode in Mode]}"
            ) from None
        _check_audio_values(
            'initial', c.initial_volume, c.initial_frequency, c.initial_playback_rate
        )
        return self


def _check_audio_values(prefix, volume, frequency, playback_rate):
    if not 0 <= volume <= 1:
        raise ValueError(f"{prefix}_volume must be in [0, 1], got {volume}")
    if frequency <= 0:
        raise ValueError(f"{prefix}_frequency must be positive, got {frequency}")
    if playback_rate <= 0:
        raise ValueError(f"{prefix}_playback_rate must be positive, got {playback_rate}")


def load_config(path: Optional[Union[str, Path]] = None) -> Cfg:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to config file. If None, the defaults are used.

    Returns:
        Validated configuration object
    """
    if path is None:
        return Cfg().validate()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    logger.debug("Loaded config from %s", config_path)
    return config_from_dict(data).validate()


def config_from_dict(data: Dict[str, Any]) -> Cfg:
    """
    Convert a (possibly partial) dictionary to a configuration object.

    >>> cfg = config_from_dict({'mapping': {'frequency_band': [220, 880]}})
    >>> cfg.mapping.frequency_band
    (220.0, 880.0)
    >>> cfg.mapping.base_frequency
    440.0
    """
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping, got {type(data).__name__}")
    cfg = Cfg()
    for section_name, section_data in data.items():
        section = getattr(cfg, section_name, None)
        if not is_dataclass(section):
            raise ValueError(f"Unknown config section: {section_name!r}")
        if section_data is None:
            section_data = {}
        if not isinstance(section_data, dict):
            raise ValueError(
                f"Config section {section_name!r} must be a mapping, got {section_data!r}"
            )
        _update_section(section, section_name, section_data)
    return cfg


def _update_section(section, section_name: str, section_data: Dict[str, Any]):
    known = {f.name: f for f in fields(section)}
    for key, value in section_data.items():
        if key not in known:
            raise ValueError(f"Unknown config key: {section_name}.{key}")
        default = getattr(section, key)
        if isinstance(default, tuple):
            if not isinstance(value, (list, tuple)) or len(value) != len(default):
                raise ValueError(
                    f"{section_name}.{key} must have {len(default)} items, got {value!r}"
                )
            value = tuple(_to_float(section_name, key, v) for v in value)
        elif isinstance(default, float):
            value = _to_float(section_name, key, value)
        setattr(section, key, value)


def _to_float(section_name: str, key: str, value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(
            f"{section_name}.{key} must be a number, got {value!r}"
        ) from None
