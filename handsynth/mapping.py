"""Mapping of hand geometry to audio parameters, mode by mode."""

import math
from typing import NamedTuple, Tuple

from handsynth.config import MappingConfig
from handsynth.hand_features import index_tips_distance
from handsynth.modes import Mode
from handsynth.util import HandLandmark, clamp

# Floor for values that must stay strictly positive (Hz, speed ratio)
MIN_POSITIVE = 1e-6


class ParameterValues(NamedTuple):
    volume: float
    frequency: float
    playback_rate: float


def identity(x):
    """Identity function."""
    return x


class RangeMapper:
    """
    A callable class that maps values from one range to another, clamping what
    falls outside the source range.
    Precomputes scaling factors for better performance.

    >>> mapper = RangeMapper((0, 1), (100, 200))
    >>> mapper(0.5)
    150.0
    >>> mapper(-0.1)  # Below range
    100
    >>> mapper(1.5)   # Above range
    200
    """

    def __init__(
        self,
        value_range: Tuple[float, float],
        target_range: Tuple[float, float],
        *,
        ingress=identity,
        egress=identity,
    ):
        """
        Initialize the range mapper with source and target ranges.

        Args:
            value_range: The range of the input value (min, max)
            target_range: The range to map to (min, max)
        """
        self.value_min, self.value_max = value_range
        self.target_min, self.target_max = target_range
        if self.value_max <= self.value_min:
            raise ValueError(f"Empty value range: {value_range}")

        self._value_span = self.value_max - self.value_min
        self._target_span = self.target_max - self.target_min
        self._scale_factor = self._target_span / self._value_span
        self.ingress = ingress
        self.egress = egress

    def __call__(self, value: float) -> float:
        value = self.ingress(value)
        if value <= self.value_min:
            output = self.target_min
        elif value >= self.value_max:
            output = self.target_max
        else:
            output = self.target_min + (value - self.value_min) * self._scale_factor

        return self.egress(output)


def clamp_parameters(values: ParameterValues) -> ParameterValues:
    """
    Force values into the ranges the audio engine accepts.

    Non-finite values raise ``ValueError``.

    >>> clamp_parameters(ParameterValues(1.2, -5.0, 0.0))
    ParameterValues(volume=1.0, frequency=1e-06, playback_rate=1e-06)
    """
    if not all(math.isfinite(v) for v in values):
        raise ValueError(f"Non-finite parameter values: {tuple(values)}")
    return ParameterValues(
        volume=float(clamp(values.volume, 0.0, 1.0)),
        frequency=float(max(values.frequency, MIN_POSITIVE)),
        playback_rate=float(max(values.playback_rate, MIN_POSITIVE)),
    )


def volume_from_index_distance(distance: float, config: MappingConfig) -> float:
    """
    Linear from 0 at the low anchor to 1 at the high anchor, clamped outside.

    >>> round(volume_from_index_distance(0.5, MappingConfig()), 6)
    0.5
    >>> volume_from_index_distance(0.1, MappingConfig())
    0.0
    """
    return RangeMapper(config.volume_distance_range, (0.0, 1.0))(distance)


def frequency_from_x(x: float, config: MappingConfig) -> float:
    """
    >>> frequency_from_x(1.0, MappingConfig())
    660.0
    >>> frequency_from_x(0.5, MappingConfig(frequency_band=(220.0, 880.0)))
    550.0
    """
    return RangeMapper((0.0, 1.0), config.frequency_band)(x)


# -------------------------------------------------------------------------------
# Per-mode mappings
# -------------------------------------------------------------------------------


def _volume_control(snapshot, current: ParameterValues, config: MappingConfig):
    hand1, hand2 = snapshot.hands[:2]
    volume = volume_from_index_distance(index_tips_distance(hand1, hand2), config)
    return current._replace(volume=volume)


def _audio_equalizer(snapshot, current: ParameterValues, config: MappingConfig):
    # the first hand of the snapshot is the one that steers the pitch
    x = snapshot.hands[0][HandLandmark.INDEX_FINGER_TIP].x
    frequency = frequency_from_x(x, config)
    return current._replace(
        frequency=frequency, playback_rate=frequency / config.base_frequency
    )


def _total_lock(snapshot, current: ParameterValues, config: MappingConfig):
    return current


def _full_reset(snapshot, current: ParameterValues, config: MappingConfig):
    return ParameterValues(
        volume=config.reset_volume,
        frequency=config.reset_frequency,
        playback_rate=config.reset_playback_rate,
    )


mode_mappings = {
    Mode.VOLUME_CONTROL: _volume_control,
    Mode.AUDIO_EQUALIZER: _audio_equalizer,
    Mode.TOTAL_LOCK: _total_lock,
    Mode.FULL_RESET: _full_reset,
}


def map_parameters(
    mode: Mode, snapshot, current: ParameterValues, config: MappingConfig = None
) -> ParameterValues:
    """
    Compute the parameter values of ``mode`` for a two-hand ``snapshot``.

    Pure: ``current`` (the last committed values) is what frozen parameters keep.

    Args:
        mode: The mode to map for
        snapshot: A ``LandmarkSnapshot`` holding (at least) two hands
        current: The last committed parameter values
        config: Mapping settings (defaults if None)

    Returns:
        The clamped new parameter values
    """
    config = config or MappingConfig()
    if len(snapshot.hands) < 2:
        raise ValueError(f"Need two hands to map parameters, got {len(snapshot.hands)}")
    mapping = mode_mappings[Mode(mode)]
    return clamp_parameters(mapping(snapshot, ParameterValues(*current), config))
