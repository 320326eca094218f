"""Display utilities: overlay of the control state on the video frame."""

from typing import Callable, Optional, Tuple, Union

import cv2
import numpy as np

from handsynth.control import ControlState, FrameResult, display_features

# -------------------------------------------------------------------------------
# Types
# -------------------------------------------------------------------------------

Color = Union[Tuple[int, int, int], Tuple[int, int, int, int]]  # BGR or BGRA

WHITE = (255, 255, 255)
GREEN = (0, 255, 0)
ORANGE = (0, 165, 255)

# -------------------------------------------------------------------------------
# Screen drawing functions
# -------------------------------------------------------------------------------


def display_text_features_on_image(
    img: np.ndarray,
    text_features: dict,
    *,
    font=cv2.FONT_HERSHEY_SIMPLEX,
    font_scale: float = 0.7,
    color: Color = GREEN,
    thickness: int = 2,
    x_pos=10,
    y_pos=30,
    y_increment=30,
    bg_color: Color = (50, 50, 50, 160),
):
    """
    Display ``key: value`` lines on the image, over a semi-transparent background.

    Args:
        img: The image to draw on
        text_features: Dictionary of (already formatted) values to show
        font: Font type to use
        font_scale: Size of the font
        color: Text color in BGR format
        thickness: Line thickness of text
        x_pos: Starting x position for text
        y_pos: Starting y position for text
        y_increment: Vertical space between lines
        bg_color: Background color (BGR + alpha) where alpha is 0-255
    """
    if not text_features:
        return img

    overlay = img.copy()

    if len(bg_color) == 4:
        bg_rgb = bg_color[:3]
        alpha = bg_color[3] / 255.0
    else:
        bg_rgb = bg_color
        alpha = 0.5

    lines = [f"{key}: {value}" for key, value in text_features.items()]

    padding = 5
    for idx, text in enumerate(lines):
        (text_width, text_height), _ = cv2.getTextSize(text, font, font_scale, thickness)
        cv2.rectangle(
            overlay,
            (x_pos - padding, y_pos + idx * y_increment - text_height - padding),
            (x_pos + text_width + padding, y_pos + idx * y_increment + padding),
            bg_rgb,
            -1,
        )

    cv2.addWeighted(overlay, alpha, img, 1 - alpha, 0, img)

    for idx, text in enumerate(lines):
        cv2.putText(
            img, text, (x_pos, y_pos + idx * y_increment), font, font_scale, color, thickness
        )

    return img


def draw_hand_landmarks(img, hand_detection, mp_hands, mp_draw):
    """Draw the MediaPipe hand landmarks on the image."""
    if hand_detection.multi_hand_landmarks:
        for hand_landmarks in hand_detection.multi_hand_landmarks:
            mp_draw.draw_landmarks(img, hand_landmarks, mp_hands.HAND_CONNECTIONS)
    return img


def draw_index_line(img, index_line, *, color: Color = WHITE, thickness: int = 4):
    """Draw the segment between the two index finger tips (normalized coordinates)."""
    h, w = img.shape[:2]
    (x1, y1), (x2, y2) = index_line
    cv2.line(
        img,
        (int(x1 * w), int(y1 * h)),
        (int(x2 * w), int(y2 * h)),
        color,
        thickness,
    )
    return img


def draw_volume_bar(
    img, volume: float, *, height: int = 12, margin: int = 10, color: Color = GREEN
):
    """Horizontal bar at the bottom of the image, filled proportionally to volume."""
    h, w = img.shape[:2]
    y1 = h - margin
    y0 = y1 - height
    x0, x1 = margin, w - margin
    cv2.rectangle(img, (x0, y0), (x1, y1), WHITE, 1)
    filled = x0 + int(round((x1 - x0) * volume))
    if filled > x0:
        cv2.rectangle(img, (x0, y0), (filled, y1), color, -1)
    return img


def draw_on_screen(
    img: np.ndarray,
    state: ControlState,
    result: FrameResult,
    *,
    tracker=None,
    hand_detection=None,
    draw_landmarks: bool = True,
    draw_volume: bool = True,
    draw_text_features: Optional[Callable] = display_text_features_on_image,
):
    """
    Draw hand landmarks, the volume-control line and the state panel on the image.

    Args:
        img: The input image
        state: The committed control state
        result: The result of this frame's ``process_frame``
        tracker: ``HandTracker`` whose MediaPipe modules draw the landmarks
        hand_detection: Hand detection results, needed to draw landmarks
        draw_landmarks: Whether to draw hand landmarks
        draw_volume: Whether to draw the volume bar
        draw_text_features: Function to draw the text panel (or None to skip)

    Returns:
        img: The image with visualizations added
    """
    if draw_landmarks and tracker is not None and hand_detection is not None:
        img = draw_hand_landmarks(img, hand_detection, tracker.mp_hands, tracker.mp_draw)

    if result.index_line is not None:
        img = draw_index_line(img, result.index_line)

    if draw_text_features:
        color = GREEN if state.has_signal else ORANGE
        img = draw_text_features(img, display_features(state), color=color)

    if draw_volume:
        img = draw_volume_bar(img, state.volume)

    return img
