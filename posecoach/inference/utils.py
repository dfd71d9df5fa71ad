"""
Geometry helpers for pose keypoints.
"""

from typing import Iterable, NamedTuple

import numpy as np

from ..config import CONFIDENCE_THRESHOLD
from ..data.keypoints import (
    Keypoint, Pose,
    LEFT_SHOULDER, RIGHT_SHOULDER, LEFT_ELBOW, RIGHT_ELBOW,
    LEFT_WRIST, RIGHT_WRIST, LEFT_HIP, RIGHT_HIP,
    LEFT_KNEE, RIGHT_KNEE, LEFT_ANKLE, RIGHT_ANKLE
)


LEFT = "left"
RIGHT = "right"


class SidePoints(NamedTuple):
    """Keypoints of one body side."""
    shoulder: Keypoint
    elbow: Keypoint
    wrist: Keypoint
    hip: Keypoint
    knee: Keypoint
    ankle: Keypoint


_SIDE_INDICES = {
    LEFT: (LEFT_SHOULDER, LEFT_ELBOW, LEFT_WRIST, LEFT_HIP, LEFT_KNEE, LEFT_ANKLE),
    RIGHT: (RIGHT_SHOULDER, RIGHT_ELBOW, RIGHT_WRIST, RIGHT_HIP, RIGHT_KNEE, RIGHT_ANKLE),
}


def angle(a: Keypoint, b: Keypoint, c: Keypoint) -> float:
    """
    Calculate the angle at vertex b between rays b->a and b->c.

    Args:
        a: First endpoint
        b: Vertex
        c: Second endpoint

    Returns:
        Angle in degrees within [0, 180]
    """
    radians = np.arctan2(c.y - b.y, c.x - b.x) - np.arctan2(a.y - b.y, a.x - b.x)
    degrees = abs(float(np.degrees(radians)))
    return 360.0 - degrees if degrees > 180.0 else degrees


def distance(a: Keypoint, b: Keypoint) -> float:
    """Euclidean distance between two keypoints in pixels."""
    return float(np.hypot(a.x - b.x, a.y - b.y))


def dominant_side(pose: Pose) -> str:
    """
    Pick the body side facing the camera.

    Sums shoulder, hip and knee confidence per side. Ties go to the left.

    Args:
        pose: Input pose

    Returns:
        "left" or "right"
    """
    left_conf = pose[LEFT_SHOULDER].score + pose[LEFT_HIP].score + pose[LEFT_KNEE].score
    right_conf = pose[RIGHT_SHOULDER].score + pose[RIGHT_HIP].score + pose[RIGHT_KNEE].score
    return LEFT if left_conf >= right_conf else RIGHT


def side_points(pose: Pose, side: str) -> SidePoints:
    """Resolve the six limb keypoints of the given side."""
    if side not in _SIDE_INDICES:
        raise ValueError(f"Unknown side: {side}")
    return SidePoints(*(pose[i] for i in _SIDE_INDICES[side]))


def is_valid(points: Iterable[Keypoint], threshold: float = CONFIDENCE_THRESHOLD) -> bool:
    """True if every keypoint's score exceeds the threshold."""
    return all(p.score > threshold for p in points)
