"""Hand tracking with MediaPipe, and conversion of its output to snapshots."""

import time

import cv2
import mediapipe as mp

from handsynth.config import TrackerConfig
from handsynth.hand_features import LandmarkSnapshot


class HandTracker:
    """
    Detects hand landmarks using MediaPipe Hands.

    Attributes:
        max_hands (int): Maximum number of hands to detect.
        detection_con (float): Minimum detection confidence threshold.
        track_con (float): Minimum tracking confidence threshold.
    """

    def __init__(
        self,
        *,
        max_hands=2,
        model_complexity=1,
        detection_con=0.7,
        track_con=0.7,
    ):
        self.max_hands = max_hands
        self.model_complexity = model_complexity
        self.detection_con = detection_con
        self.track_con = track_con

        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=self.max_hands,
            model_complexity=self.model_complexity,
            min_detection_confidence=self.detection_con,
            min_tracking_confidence=self.track_con,
        )
        self.mp_draw = mp.solutions.drawing_utils

    @classmethod
    def from_config(cls, config: TrackerConfig) -> 'HandTracker':
        return cls(
            max_hands=config.max_num_hands,
            model_complexity=config.model_complexity,
            detection_con=config.min_detection_confidence,
            track_con=config.min_tracking_confidence,
        )

    def find_hands(self, img):
        """
        Detects hands in the provided (BGR) image.

        Returns:
            The MediaPipe hand detection results
        """
        img_rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        return self.hands.process(img_rgb)

    def close(self):
        self.hands.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def snapshot_from_detection(hand_detection, timestamp=None) -> LandmarkSnapshot:
    """
    Convert MediaPipe hand detection results into a ``LandmarkSnapshot``.

    Hands keep MediaPipe's order; the first one is the pitch hand.
    """
    if timestamp is None:
        timestamp = time.time()
    if not hand_detection.multi_hand_landmarks:
        return LandmarkSnapshot(timestamp=timestamp)

    handedness_list = hand_detection.multi_handedness or []
    labels = []
    for idx in range(len(hand_detection.multi_hand_landmarks)):
        label = None
        if idx < len(handedness_list) and handedness_list[idx].classification:
            label = handedness_list[idx].classification[0].label
        labels.append(label)

    return LandmarkSnapshot.from_landmarks(
        (hand_landmarks.landmark for hand_landmarks in hand_detection.multi_hand_landmarks),
        handedness=labels,
        timestamp=timestamp,
    )
