"""
Pose data records.
"""

from .keypoints import (
    Keypoint, Pose, COCO_KEYPOINT_NAMES, NUM_KEYPOINTS, SKELETON_CONNECTIONS
)

__all__ = [
    'Keypoint', 'Pose', 'COCO_KEYPOINT_NAMES', 'NUM_KEYPOINTS', 'SKELETON_CONNECTIONS'
]
