"""Operating modes and the rules to move between them."""

import logging
from enum import Enum
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    VOLUME_CONTROL = 'VolumeControl'
    AUDIO_EQUALIZER = 'AudioEqualizer'
    TOTAL_LOCK = 'TotalLock'
    FULL_RESET = 'FullReset'

    def __str__(self):
        return self.value

    @property
    def description(self) -> str:
        return mode_descriptions[self]


mode_descriptions = {
    Mode.VOLUME_CONTROL: "Spread your index fingers apart to raise the volume",
    Mode.AUDIO_EQUALIZER: "Move your first hand left/right to change the pitch",
    Mode.TOTAL_LOCK: "All parameters locked",
    Mode.FULL_RESET: "Volume, pitch and speed back to defaults",
}


class ModeChange(NamedTuple):
    """Emitted once, on the frame where the mode changes."""

    previous: Mode
    current: Mode


# (predicate name, mode) in priority order: first match wins
transition_rules = (
    ('both_pinched', Mode.AUDIO_EQUALIZER),
    ('both_only_index', Mode.VOLUME_CONTROL),
    ('both_open', Mode.TOTAL_LOCK),
    ('one_open', Mode.FULL_RESET),
)


def next_mode(current: Mode, predicates) -> Mode:
    """
    The mode selected by the first rule whose predicate holds, ``current`` if none does.

    ``predicates`` is anything with the ``GesturePredicates`` attributes.

    >>> from handsynth.hand_features import GesturePredicates
    >>> next_mode(Mode.TOTAL_LOCK, GesturePredicates(both_pinched=True, one_open=True))
    <Mode.AUDIO_EQUALIZER: 'AudioEqualizer'>
    >>> next_mode(Mode.TOTAL_LOCK, GesturePredicates())
    <Mode.TOTAL_LOCK: 'TotalLock'>
    """
    for predicate_name, mode in transition_rules:
        if getattr(predicates, predicate_name):
            return mode
    return Mode(current)


def transition(state, predicates) -> Optional[ModeChange]:
    """
    Move ``state`` to the next mode, remembering the previous one.

    ``state`` needs ``mode`` and ``previous_mode`` attributes (see
    ``handsynth.control.ControlState``). Nothing is touched if the mode stays the same.

    Returns:
        The ``ModeChange`` if the mode changed, None otherwise
    """
    new_mode = next_mode(state.mode, predicates)
    if new_mode == state.mode:
        return None
    change = ModeChange(previous=Mode(state.mode), current=new_mode)
    state.previous_mode = change.previous
    state.mode = change.current
    logger.info("Mode change: %s -> %s", change.previous, change.current)
    return change
