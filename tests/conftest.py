"""Synthetic hands for the tests: 21 landmarks with only the fingertips placed."""

import pytest

from handsynth.hand_features import LandmarkSnapshot
from handsynth.util import HandLandmark


def make_hand(
    *,
    thumb=(0.45, 0.5),
    index=(0.5, 0.5),
    middle_y=0.4,
    ring_y=0.4,
    pinky_y=0.4,
):
    """
    A 21-landmark hand (list of (x, y, z)); everything but the fingertips sits at the
    center. By default the fingers other than the index are above the index tip, so
    the hand is not "only index extended".
    """
    points = [(0.5, 0.5, 0.0)] * 21
    points[HandLandmark.THUMB_TIP] = (*thumb, 0.0)
    points[HandLandmark.INDEX_FINGER_TIP] = (*index, 0.0)
    points[HandLandmark.MIDDLE_FINGER_TIP] = (index[0] + 0.02, middle_y, 0.0)
    points[HandLandmark.RING_FINGER_TIP] = (index[0] + 0.04, ring_y, 0.0)
    points[HandLandmark.PINKY_TIP] = (index[0] + 0.06, pinky_y, 0.0)
    return points


def pinched_hand(index_x=0.5):
    return make_hand(thumb=(index_x - 0.02, 0.5), index=(index_x, 0.5))


def open_hand(index_x=0.5):
    return make_hand(thumb=(index_x - 0.25, 0.5), index=(index_x, 0.5))


def index_only_hand(index_x=0.5, index_y=0.2):
    # thumb far from the index tip, so this hand is also "open"
    return make_hand(
        thumb=(index_x, 0.7),
        index=(index_x, index_y),
        middle_y=0.6,
        ring_y=0.6,
        pinky_y=0.6,
    )


def snapshot(*hands):
    return LandmarkSnapshot.from_landmarks(hands)


@pytest.fixture
def hand_factory():
    return make_hand


@pytest.fixture
def two_pinched():
    return snapshot(pinched_hand(0.3), pinched_hand(0.7))


@pytest.fixture
def two_open():
    return snapshot(open_hand(0.3), open_hand(0.7))


@pytest.fixture
def two_index_only():
    return snapshot(index_only_hand(0.25), index_only_hand(0.75))
