"""
Keypoint and pose records for the 17-landmark COCO layout.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union, Any, Dict

import numpy as np

from ..errors import InvalidPose


# COCO keypoint names, index-bound; this order is the wire contract with the
# pose provider
COCO_KEYPOINT_NAMES = [
    'nose', 'left_eye', 'right_eye', 'left_ear', 'right_ear',
    'left_shoulder', 'right_shoulder', 'left_elbow', 'right_elbow',
    'left_wrist', 'right_wrist', 'left_hip', 'right_hip',
    'left_knee', 'right_knee', 'left_ankle', 'right_ankle'
]

NUM_KEYPOINTS = len(COCO_KEYPOINT_NAMES)

NOSE = 0
LEFT_SHOULDER, RIGHT_SHOULDER = 5, 6
LEFT_ELBOW, RIGHT_ELBOW = 7, 8
LEFT_WRIST, RIGHT_WRIST = 9, 10
LEFT_HIP, RIGHT_HIP = 11, 12
LEFT_KNEE, RIGHT_KNEE = 13, 14
LEFT_ANKLE, RIGHT_ANKLE = 15, 16

# Limb and torso connections drawn over the video
SKELETON_CONNECTIONS = [
    (5, 7), (7, 9),       # left arm
    (6, 8), (8, 10),      # right arm
    (5, 6),               # shoulders
    (5, 11), (6, 12),     # torso
    (11, 12),             # hips
    (11, 13), (13, 15),   # left leg
    (12, 14), (14, 16)    # right leg
]


@dataclass(frozen=True)
class Keypoint:
    """One labeled 2D landmark in pixel space with a detection score."""
    x: float
    y: float
    score: float = 0.0


KeypointLike = Union[Keypoint, Dict[str, Any], Sequence[float]]


def _to_keypoint(value: KeypointLike) -> Keypoint:
    if isinstance(value, Keypoint):
        return value
    if isinstance(value, dict):
        score = value.get('score', value.get('confidence', 0.0))
        return Keypoint(float(value['x']), float(value['y']), float(score))
    if len(value) == 3:
        x, y, score = value
        return Keypoint(float(x), float(y), float(score))
    if len(value) == 2:
        x, y = value
        return Keypoint(float(x), float(y), 0.0)
    raise InvalidPose(f"Cannot interpret keypoint: {value!r}")


@dataclass(frozen=True)
class Pose:
    """The 17 keypoints of one detected body in one frame."""
    keypoints: Tuple[Keypoint, ...]

    def __post_init__(self):
        if len(self.keypoints) != NUM_KEYPOINTS:
            raise InvalidPose(
                f"Expected {NUM_KEYPOINTS} keypoints, got {len(self.keypoints)}"
            )

    def __getitem__(self, index: int) -> Keypoint:
        return self.keypoints[index]

    def __len__(self) -> int:
        return len(self.keypoints)

    def __iter__(self):
        return iter(self.keypoints)

    def named(self, name: str) -> Keypoint:
        """Get a keypoint by its COCO name."""
        return self.keypoints[COCO_KEYPOINT_NAMES.index(name)]

    @classmethod
    def from_keypoints(cls, keypoints: Iterable[KeypointLike]) -> "Pose":
        """
        Build a pose from keypoint records.

        Args:
            keypoints: 17 items, each a Keypoint, a dict with x/y/score
                (or confidence), or an (x, y[, score]) sequence

        Returns:
            Validated Pose
        """
        return cls(tuple(_to_keypoint(kp) for kp in keypoints))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Pose":
        """
        Build a pose from a [17, 3] array of (x, y, score).

        Args:
            array: Keypoint array

        Returns:
            Validated Pose
        """
        array = np.asarray(array, dtype=float)
        if array.ndim != 2 or array.shape[0] != NUM_KEYPOINTS or array.shape[1] not in (2, 3):
            raise InvalidPose(f"Expected array of shape (17, 3), got {array.shape}")
        return cls.from_keypoints(array.tolist())

    def to_array(self) -> np.ndarray:
        """Convert to a [17, 3] array of (x, y, score)."""
        return np.array([[kp.x, kp.y, kp.score] for kp in self.keypoints], dtype=float)

    def to_dicts(self) -> List[Dict[str, Any]]:
        """Convert to a list of keypoint dictionaries."""
        return [
            {'name': name, 'x': kp.x, 'y': kp.y, 'score': kp.score}
            for name, kp in zip(COCO_KEYPOINT_NAMES, self.keypoints)
        ]
