import math

import pytest

from conftest import index_only_hand, make_hand, open_hand, pinched_hand
from handsynth.hand_features import (
    LandmarkPoint,
    LandmarkSnapshot,
    MalformedLandmarksError,
    hand_features,
    is_only_index_extended,
    is_open_palm,
    is_pinch,
    thumb_index_distance,
    to_hand,
    two_hand_predicates,
)


@pytest.mark.parametrize(
    "thumb_x, expected_pinch, expected_open",
    [
        (0.49, True, False),  # d = 0.01
        (0.45, True, False),  # d = 0.05
        (0.3, False, True),  # d = 0.2
        (0.0, False, True),  # d = 0.5
    ],
)
def test_pinch_and_open_palm_thresholds(thumb_x, expected_pinch, expected_open):
    hand = to_hand(make_hand(thumb=(thumb_x, 0.5), index=(0.5, 0.5)))
    assert is_pinch(hand) is expected_pinch
    assert is_open_palm(hand) is expected_open


def test_boundary_at_default_threshold_is_neither_pinch_nor_open():
    hand = to_hand(make_hand(thumb=(0.0, 0.5), index=(0.1, 0.5)))
    assert thumb_index_distance(hand) == 0.1
    assert not is_pinch(hand)
    assert not is_open_palm(hand)


def test_boundary_distance_is_neither_pinch_nor_open():
    # 0.25 is exact in binary, so the distance equals the threshold exactly
    hand = to_hand(make_hand(thumb=(0.25, 0.5), index=(0.5, 0.5)))
    assert thumb_index_distance(hand) == 0.25
    assert not is_pinch(hand, threshold=0.25)
    assert not is_open_palm(hand, threshold=0.25)


def test_distance_ignores_z():
    points = make_hand(thumb=(0.45, 0.5), index=(0.5, 0.5))
    points[4] = (0.45, 0.5, 0.9)
    assert thumb_index_distance(to_hand(points)) == pytest.approx(0.05)


@pytest.mark.parametrize("bad_hand", [None, [], [(0.5, 0.5)] * 5, 42])
def test_predicates_fail_closed_on_malformed_input(bad_hand):
    assert is_pinch(bad_hand) is False
    assert is_open_palm(bad_hand) is False
    assert is_only_index_extended(bad_hand) is False


def test_only_index_extended():
    assert is_only_index_extended(to_hand(index_only_hand()))
    assert not is_only_index_extended(to_hand(pinched_hand()))


def test_only_index_extended_needs_index_strictly_above_each_other_tip():
    tied = make_hand(index=(0.5, 0.3), middle_y=0.6, ring_y=0.3, pinky_y=0.6)
    assert not is_only_index_extended(to_hand(tied))
    below_pinky = make_hand(index=(0.5, 0.3), middle_y=0.6, ring_y=0.6, pinky_y=0.2)
    assert not is_only_index_extended(to_hand(below_pinky))


def test_only_index_extended_ignores_thumb():
    high_thumb = make_hand(
        thumb=(0.5, 0.0), index=(0.5, 0.3), middle_y=0.6, ring_y=0.6, pinky_y=0.6
    )
    assert is_only_index_extended(to_hand(high_thumb))


def test_two_hand_predicates():
    p = two_hand_predicates(to_hand(pinched_hand()), to_hand(pinched_hand()))
    assert p.both_pinched and not p.both_open and not p.one_open

    p = two_hand_predicates(to_hand(open_hand()), to_hand(pinched_hand()))
    assert p.one_open and not p.both_open and not p.both_pinched

    p = two_hand_predicates(to_hand(open_hand()), to_hand(open_hand()))
    assert p.both_open and p.one_open

    p = two_hand_predicates(to_hand(index_only_hand()), to_hand(index_only_hand()))
    assert p.both_only_index and p.both_open


def test_two_hand_predicates_use_threshold():
    hand = to_hand(make_hand(thumb=(0.3, 0.5), index=(0.5, 0.5)))  # d = 0.2
    assert two_hand_predicates(hand, hand).both_open
    assert two_hand_predicates(hand, hand, pinch_threshold=0.3).both_pinched


# -------------------------------------------------------------------------------
# Validation
# -------------------------------------------------------------------------------


class _Landmark:
    def __init__(self, x, y, z):
        self.x, self.y, self.z = x, y, z


def test_to_hand_accepts_landmark_objects_and_2d_points():
    hand = to_hand([_Landmark(0.1, 0.2, 0.3)] * 21)
    assert hand[0] == LandmarkPoint(0.1, 0.2, 0.3)
    hand = to_hand([(0.1, 0.2)] * 21)
    assert hand[20] == LandmarkPoint(0.1, 0.2, 0.0)


@pytest.mark.parametrize(
    "points, match",
    [
        ([(0.5, 0.5)] * 22, "exactly 21"),
        ([(0.5, 0.5)] * 20, "exactly 21"),
        ([(0.5, 0.5)] * 20 + [(0.5, math.inf)], "non-finite"),
        ([(0.5, 0.5)] * 20 + [(0.5,)], "2 or 3 coordinates"),
        ([(0.5, 0.5)] * 20 + [('a', 0.5)], "non-numeric"),
        ([(0.5, 0.5)] * 20 + [None], "not a point"),
    ],
)
def test_to_hand_rejects_malformed_landmarks(points, match):
    with pytest.raises(MalformedLandmarksError, match=match):
        to_hand(points)


def test_malformed_landmarks_error_is_a_value_error():
    assert issubclass(MalformedLandmarksError, ValueError)


def test_snapshot_from_landmarks():
    snap = LandmarkSnapshot.from_landmarks(
        [pinched_hand(), open_hand()], handedness=['Left', 'Right'], timestamp=1.5
    )
    assert snap.n_hands == 2
    assert snap.handedness == ('Left', 'Right')
    assert snap.timestamp == 1.5
    assert all(len(hand) == 21 for hand in snap.hands)


def test_snapshot_drops_truncated_hands():
    snap = LandmarkSnapshot.from_landmarks(
        [pinched_hand(), [(0.5, 0.5)] * 10], handedness=['Left', 'Right']
    )
    assert snap.n_hands == 1
    assert snap.handedness == ('Left',)


def test_snapshot_names_the_malformed_hand():
    bad = make_hand()
    bad[8] = (float('nan'), 0.5, 0.0)
    with pytest.raises(MalformedLandmarksError, match="Hand 1"):
        LandmarkSnapshot.from_landmarks([pinched_hand(), bad])


def test_hand_features_are_prefixed_per_hand():
    snap = LandmarkSnapshot.from_landmarks([pinched_hand(0.3), open_hand(0.7)])
    features = hand_features(snap)
    assert features['h0_is_pinch'] is True
    assert features['h1_is_open_palm'] is True
    assert features['h1_index_tip'] == (0.7, 0.5)
    assert 'h0_landmarks' not in features


def test_validated_checks_directly_built_snapshots():
    bad = to_hand(make_hand())
    bad = bad[:8] + (LandmarkPoint(float('nan'), 0.5),) + bad[9:]
    with pytest.raises(MalformedLandmarksError, match="Hand 0"):
        LandmarkSnapshot(hands=(bad, to_hand(pinched_hand()))).validated()

    truncated = LandmarkSnapshot(hands=(to_hand(pinched_hand()), ((0.5, 0.5),) * 5))
    assert truncated.validated().n_hands == 1


def test_snapshot_rejects_a_hand_that_is_not_a_sequence():
    with pytest.raises(MalformedLandmarksError, match="Hand 1"):
        LandmarkSnapshot.from_landmarks([pinched_hand(), None])
