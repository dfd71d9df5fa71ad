"""
MediaPipe-based pose provider.
"""

from typing import Any, Dict, List

import cv2
import mediapipe as mp
import numpy as np

from ..data.keypoints import Pose, Keypoint
from .base_model import BasePoseModel


# MediaPipe landmark index for each COCO keypoint, in COCO order
MEDIAPIPE_TO_COCO = [
    0,        # nose
    2, 5,     # left_eye, right_eye
    7, 8,     # left_ear, right_ear
    11, 12,   # shoulders
    13, 14,   # elbows
    15, 16,   # wrists
    23, 24,   # hips
    25, 26,   # knees
    27, 28,   # ankles
]


class MediaPipePose(BasePoseModel):
    """MediaPipe pose model reporting the 17 COCO keypoints."""

    def __init__(
        self,
        static_image_mode: bool = False,
        model_complexity: int = 1,
        smooth_landmarks: bool = True,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5
    ):
        """
        Initialize MediaPipe pose model.

        Args:
            static_image_mode: Whether to use static image mode
            model_complexity: Model complexity (0, 1, or 2)
            smooth_landmarks: Whether to smooth landmarks
            min_detection_confidence: Minimum detection confidence
            min_tracking_confidence: Minimum tracking confidence
        """
        super().__init__(num_keypoints=len(MEDIAPIPE_TO_COCO))

        self.static_image_mode = static_image_mode
        self.model_complexity = model_complexity
        self.smooth_landmarks = smooth_landmarks
        self.min_detection_confidence = min_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence

        self.mp_pose = mp.solutions.pose
        self.pose = self.mp_pose.Pose(
            static_image_mode=static_image_mode,
            model_complexity=model_complexity,
            smooth_landmarks=smooth_landmarks,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence
        )

    def predict_poses(self, image: np.ndarray) -> List[Pose]:
        h, w = image.shape[:2]
        image_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)

        results = self.pose.process(image_rgb)
        if not results.pose_landmarks:
            return []

        landmarks = results.pose_landmarks.landmark
        keypoints = []
        for mp_idx in MEDIAPIPE_TO_COCO:
            landmark = landmarks[mp_idx]
            keypoints.append(Keypoint(
                x=landmark.x * w,
                y=landmark.y * h,
                score=float(landmark.visibility)
            ))
        return [Pose(tuple(keypoints))]

    def close(self):
        self.pose.close()

    def get_model_info(self) -> Dict[str, Any]:
        info = super().get_model_info()
        info.update({
            'model_type': 'MediaPipe',
            'static_image_mode': self.static_image_mode,
            'model_complexity': self.model_complexity,
            'smooth_landmarks': self.smooth_landmarks,
            'min_detection_confidence': self.min_detection_confidence,
            'min_tracking_confidence': self.min_tracking_confidence
        })
        return info
