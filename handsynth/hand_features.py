"""Hand landmark types, validation, and gesture predicates."""

import logging
import math
from collections import namedtuple
from typing import Iterable, NamedTuple, Optional, Sequence, Tuple

from handsynth.util import FINGERTIPS, N_HAND_LANDMARKS, HandLandmark

logger = logging.getLogger(__name__)

DFLT_PINCH_THRESHOLD = 0.1

LandmarkPoint = namedtuple('LandmarkPoint', ['x', 'y', 'z'], defaults=[0.0])
Hand = Tuple[LandmarkPoint, ...]  # exactly N_HAND_LANDMARKS points


class MalformedLandmarksError(ValueError):
    """Raised when the tracker hands over landmark data that breaks the contract."""


# -------------------------------------------------------------------------------
# Validation
# -------------------------------------------------------------------------------


def to_landmark_point(landmark, *, idx=None) -> LandmarkPoint:
    """
    Coerce ``landmark`` to a ``LandmarkPoint``.

    Accepts ``(x, y)`` or ``(x, y, z)`` sequences, or objects with ``x``, ``y`` (and
    optionally ``z``) attributes, such as MediaPipe's ``NormalizedLandmark``.

    >>> to_landmark_point((0.1, 0.2))
    LandmarkPoint(x=0.1, y=0.2, z=0.0)
    >>> to_landmark_point((0.1, float('nan')))
    Traceback (most recent call last):
      ...
    handsynth.hand_features.MalformedLandmarksError: Landmark None has non-finite coordinates: (0.1, nan, 0.0)
    """
    if hasattr(landmark, 'x') and hasattr(landmark, 'y'):
        coords = (landmark.x, landmark.y, getattr(landmark, 'z', 0.0))
    else:
        try:
            coords = tuple(landmark)
        except TypeError:
            raise MalformedLandmarksError(
                f"Landmark {idx} is not a point: {landmark!r}"
            ) from None
        if len(coords) not in (2, 3):
            raise MalformedLandmarksError(
                f"Landmark {idx} should have 2 or 3 coordinates, got {len(coords)}"
            )
    try:
        point = LandmarkPoint(*(float(c) for c in coords))
    except (TypeError, ValueError):
        raise MalformedLandmarksError(
            f"Landmark {idx} has non-numeric coordinates: {coords!r}"
        ) from None
    if not all(math.isfinite(c) for c in point):
        raise MalformedLandmarksError(
            f"Landmark {idx} has non-finite coordinates: {tuple(point)}"
        )
    return point


def to_hand(landmarks: Iterable) -> Hand:
    """
    Validate and coerce a sequence of landmarks to a ``Hand``.

    Raises:
        MalformedLandmarksError: if there are not exactly 21 landmarks, or if any of
            them is not a finite 2D/3D point.
    """
    points = tuple(
        to_landmark_point(landmark, idx=idx) for idx, landmark in enumerate(landmarks)
    )
    if len(points) != N_HAND_LANDMARKS:
        raise MalformedLandmarksError(
            f"A hand needs exactly {N_HAND_LANDMARKS} landmarks, got {len(points)}"
        )
    return points


class LandmarkSnapshot(NamedTuple):
    """The hands seen in one frame."""

    hands: Tuple[Hand, ...] = ()
    handedness: Tuple[Optional[str], ...] = ()
    timestamp: Optional[float] = None

    @property
    def n_hands(self) -> int:
        return len(self.hands)

    @classmethod
    def from_landmarks(
        cls,
        hands_landmarks: Iterable[Sequence] = (),
        handedness: Iterable[Optional[str]] = (),
        timestamp: Optional[float] = None,
    ) -> 'LandmarkSnapshot':
        """
        Build a snapshot from raw per-hand landmark sequences.

        A hand too short to contain all fingertips is treated as not detected (the
        frame becomes an incomplete one). Any other defect raises
        ``MalformedLandmarksError``.
        """
        hands = []
        labels = []
        handedness = list(handedness)
        for i, landmarks in enumerate(hands_landmarks):
            try:
                landmarks = list(landmarks)
            except TypeError:
                raise MalformedLandmarksError(
                    f"Hand {i} is not a sequence of landmarks: {landmarks!r}"
                ) from None
            if len(landmarks) <= max(FINGERTIPS):
                logger.warning(
                    "Dropping hand %d: only %d landmarks, fingertips missing",
                    i,
                    len(landmarks),
                )
                continue
            try:
                hands.append(to_hand(landmarks))
            except MalformedLandmarksError as e:
                raise MalformedLandmarksError(f"Hand {i}: {e}") from e
            labels.append(handedness[i] if i < len(handedness) else None)
        return cls(hands=tuple(hands), handedness=tuple(labels), timestamp=timestamp)

    def validated(self) -> 'LandmarkSnapshot':
        """
        The same snapshot, checked the way ``from_landmarks`` checks raw input.

        Use it on snapshots built with the plain constructor.
        """
        return self.from_landmarks(self.hands, self.handedness, self.timestamp)


# -------------------------------------------------------------------------------
# Geometry helpers
# -------------------------------------------------------------------------------


def calculate_euclidean_distance(point1, point2):
    """
    Calculate the Euclidean distance between two points, in the (x, y) plane.

    >>> calculate_euclidean_distance(LandmarkPoint(0, 0), LandmarkPoint(3, 4))
    5.0
    """
    return math.sqrt((point1.x - point2.x) ** 2 + (point1.y - point2.y) ** 2)


def thumb_index_distance(hand: Hand) -> float:
    return calculate_euclidean_distance(
        hand[HandLandmark.THUMB_TIP], hand[HandLandmark.INDEX_FINGER_TIP]
    )


def index_tips_distance(hand1: Hand, hand2: Hand) -> float:
    """Distance between the index finger tips of two hands."""
    return calculate_euclidean_distance(
        hand1[HandLandmark.INDEX_FINGER_TIP], hand2[HandLandmark.INDEX_FINGER_TIP]
    )


# -------------------------------------------------------------------------------
# Gesture predicates
# -------------------------------------------------------------------------------


def is_pinch(hand: Hand, threshold: float = DFLT_PINCH_THRESHOLD) -> bool:
    """Thumb and index tips closer than ``threshold``. False on malformed input."""
    try:
        return thumb_index_distance(hand) < threshold
    except (IndexError, TypeError, AttributeError):
        return False


def is_open_palm(hand: Hand, threshold: float = DFLT_PINCH_THRESHOLD) -> bool:
    """
    Thumb and index tips further apart than ``threshold``.

    Not the complement of ``is_pinch``: at exactly ``threshold`` both are False.
    """
    try:
        return thumb_index_distance(hand) > threshold
    except (IndexError, TypeError, AttributeError):
        return False


def is_only_index_extended(hand: Hand) -> bool:
    """
    Index tip above (smaller y than) the middle, ring and pinky tips.

    The thumb is not looked at.
    """
    try:
        index_y = hand[HandLandmark.INDEX_FINGER_TIP].y
        return all(
            index_y < hand[tip].y
            for tip in (
                HandLandmark.MIDDLE_FINGER_TIP,
                HandLandmark.RING_FINGER_TIP,
                HandLandmark.PINKY_TIP,
            )
        )
    except (IndexError, TypeError, AttributeError):
        return False


class GesturePredicates(NamedTuple):
    both_pinched: bool = False
    both_open: bool = False
    both_only_index: bool = False
    one_open: bool = False


def two_hand_predicates(
    hand1: Hand, hand2: Hand, *, pinch_threshold: float = DFLT_PINCH_THRESHOLD
) -> GesturePredicates:
    """Aggregate the per-hand predicates of two hands."""
    open1 = is_open_palm(hand1, pinch_threshold)
    open2 = is_open_palm(hand2, pinch_threshold)
    return GesturePredicates(
        both_pinched=(
            is_pinch(hand1, pinch_threshold) and is_pinch(hand2, pinch_threshold)
        ),
        both_open=open1 and open2,
        both_only_index=is_only_index_extended(hand1) and is_only_index_extended(hand2),
        one_open=open1 or open2,
    )


# -------------------------------------------------------------------------------
# Hand feature extraction (for logging and display)
# -------------------------------------------------------------------------------

ALL_HAND_FEATURES = frozenset(
    {
        "thumb_index_distance",
        "is_pinch",
        "is_open_palm",
        "is_only_index_extended",
        "index_tip",
        "landmarks",
    }
)

DFLT_HAND_FEATURES_INCLUDE = ALL_HAND_FEATURES - {"landmarks"}


def single_hand_features(
    hand: Hand,
    include=DFLT_HAND_FEATURES_INCLUDE,
    exclude=(),
    *,
    pinch_threshold: float = DFLT_PINCH_THRESHOLD,
):
    """
    Extracts a dict of features of one hand.

    >>> hand = [(0.5, 0.5)] * 21
    >>> single_hand_features(hand, include={'thumb_index_distance', 'is_pinch'})
    {'thumb_index_distance': 0.0, 'is_pinch': True}
    """
    requested_features = set(include) - set(exclude)
    hand = to_hand(hand)
    out = {}

    if "thumb_index_distance" in requested_features:
        out["thumb_index_distance"] = thumb_index_distance(hand)
    if "is_pinch" in requested_features:
        out["is_pinch"] = is_pinch(hand, pinch_threshold)
    if "is_open_palm" in requested_features:
        out["is_open_palm"] = is_open_palm(hand, pinch_threshold)
    if "is_only_index_extended" in requested_features:
        out["is_only_index_extended"] = is_only_index_extended(hand)
    if "index_tip" in requested_features:
        tip = hand[HandLandmark.INDEX_FINGER_TIP]
        out["index_tip"] = (tip.x, tip.y)
    if "landmarks" in requested_features:
        out["landmarks"] = [tuple(p) for p in hand]

    return out


def hand_features(
    snapshot: LandmarkSnapshot,
    include=DFLT_HAND_FEATURES_INCLUDE,
    exclude=(),
    *,
    pinch_threshold: float = DFLT_PINCH_THRESHOLD,
):
    """
    Calls single_hand_features for each hand of the snapshot, and merges the results
    in one dict, keys prefixed with ``h0_``, ``h1_``, ... (the snapshot's hand order).
    """
    merged = {}
    for i, hand in enumerate(snapshot.hands):
        features = single_hand_features(
            hand, include=include, exclude=exclude, pinch_threshold=pinch_threshold
        )
        for key, value in features.items():
            merged[f"h{i}_{key}"] = value
    return merged
