"""
OpenCV overlay: skeleton and exercise status box.
"""

from typing import Tuple

import cv2
import numpy as np

from ..config import CONFIDENCE_THRESHOLD
from ..data.keypoints import Pose, SKELETON_CONNECTIONS
from ..applications.coach import DisplayState


# Colors (BGR format)
COLOR_GREEN = (0, 255, 0)
COLOR_YELLOW = (0, 255, 255)
COLOR_RED = (0, 0, 255)
COLOR_WHITE = (255, 255, 255)
COLOR_GREY = (170, 170, 170)
COLOR_CYAN = (255, 255, 0)
COLOR_AMBER = (0, 204, 255)


def draw_skeleton(
    image: np.ndarray,
    pose: Pose,
    line_color: Tuple[int, int, int] = COLOR_GREEN,
    confidence_threshold: float = CONFIDENCE_THRESHOLD,
    line_thickness: int = 4,
    point_size: int = 6
) -> np.ndarray:
    """
    Draw limb connections and joints of a pose.

    Args:
        image: BGR image, drawn in place
        pose: Pose to draw
        line_color: Color of skeleton lines (BGR)
        confidence_threshold: Minimum confidence for drawing a keypoint
        line_thickness: Thickness of skeleton lines
        point_size: Radius of keypoint circles

    Returns:
        The same image
    """
    for start_idx, end_idx in SKELETON_CONNECTIONS:
        start_kp, end_kp = pose[start_idx], pose[end_idx]
        if start_kp.score > confidence_threshold and end_kp.score > confidence_threshold:
            cv2.line(
                image,
                (int(start_kp.x), int(start_kp.y)),
                (int(end_kp.x), int(end_kp.y)),
                line_color,
                line_thickness
            )

    for kp in pose:
        if kp.score > confidence_threshold:
            cv2.circle(image, (int(kp.x), int(kp.y)), point_size, COLOR_RED, -1)

    return image


def draw_status_panel(image: np.ndarray, state: DisplayState) -> np.ndarray:
    """Draw title, counter and feedback in a translucent box."""
    overlay = image.copy()
    cv2.rectangle(overlay, (0, 0), (300, 150), (0, 0, 0), -1)
    cv2.addWeighted(overlay, 0.5, image, 0.5, 0, dst=image)

    cv2.putText(image, state.title, (20, 30),
                cv2.FONT_HERSHEY_SIMPLEX, 0.6, COLOR_GREY, 1)

    value_color = COLOR_CYAN if state.routine_active else COLOR_WHITE
    cv2.putText(image, state.display_value, (20, 80),
                cv2.FONT_HERSHEY_SIMPLEX, 1.4, value_color, 3)

    feedback_color = COLOR_GREEN if state.is_positive_feedback else COLOR_AMBER
    cv2.putText(image, state.feedback, (20, 120),
                cv2.FONT_HERSHEY_SIMPLEX, 0.8, feedback_color, 2)

    return image


def render_overlay(image: np.ndarray, pose: Pose, state: DisplayState) -> np.ndarray:
    """Draw the full overlay for one display frame."""
    color = COLOR_YELLOW if state.is_active_phase else COLOR_GREEN
    if pose is not None:
        draw_skeleton(image, pose, line_color=color)
    return draw_status_panel(image, state)
