"""Utils for handsynth."""

import json
import logging
from importlib.resources import files

pkg_name = 'handsynth'
data_files = files(pkg_name) / 'data'

logger = logging.getLogger(__name__)


def return_none(*args, **kwargs):
    """
    An empty function that returns None no matter the arguments.
    Often used as a "do nothing" general callback function.
    """
    return None


# --------------------------------------------------------------------------------------
# Constants


class HandLandmark:
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_FINGER_MCP = 5
    INDEX_FINGER_PIP = 6
    INDEX_FINGER_DIP = 7
    INDEX_FINGER_TIP = 8
    MIDDLE_FINGER_MCP = 9
    MIDDLE_FINGER_PIP = 10
    MIDDLE_FINGER_DIP = 11
    MIDDLE_FINGER_TIP = 12
    RING_FINGER_MCP = 13
    RING_FINGER_PIP = 14
    RING_FINGER_DIP = 15
    RING_FINGER_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


N_HAND_LANDMARKS = 21

FINGERTIPS = (
    HandLandmark.THUMB_TIP,
    HandLandmark.INDEX_FINGER_TIP,
    HandLandmark.MIDDLE_FINGER_TIP,
    HandLandmark.RING_FINGER_TIP,
    HandLandmark.PINKY_TIP,
)


# --------------------------------------------------------------------------------------
# Numeric utils


def clamp(value, min_value, max_value):
    """
    Clamp ``value`` to the closed interval ``[min_value, max_value]``.

    >>> clamp(1.5, 0, 1)
    1
    >>> clamp(-0.2, 0, 1)
    0
    >>> clamp(0.25, 0, 1)
    0.25
    """
    return max(min_value, min(max_value, value))


# --------------------------------------------------------------------------------------
# String utils


def format_float(value, ndigits=4):
    """
    >>> format_float(3.14159, 2)
    '3.14'
    """
    return f"{value:.{ndigits}f}"


def format_percent(value):
    """
    Format a ``[0, 1]`` ratio as a rounded percentage.

    >>> format_percent(0.5)
    '50%'
    >>> format_percent(0.756)
    '76%'
    """
    return f"{round(value * 100)}%"


def format_hz(value):
    """
    >>> format_hz(440)
    '440.0 Hz'
    """
    return f"{value:.1f} Hz"


def log_json_if_possible(x, *, log=logger.info):
    """Logs the input as json if it can be serialized, as a repr otherwise."""
    try:
        x = json.dumps(x)
    except (TypeError, ValueError):
        x = repr(x)
    log(x)
