"""
Pose provider boundary: runs the model and validates its output.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import numpy as np

from ..config import CoachConfig
from ..data.keypoints import Pose
from ..errors import InvalidPose, PoseProviderFailure
from ..models.base_model import BasePoseModel


logger = logging.getLogger(__name__)


class PoseDetector:
    """Runs a pose model on frames and returns validated poses."""

    def __init__(
        self,
        model: Optional[BasePoseModel] = None,
        config: Optional[CoachConfig] = None
    ):
        """
        Initialize pose detector.

        Args:
            model: Pose model; a MediaPipe model is built from config if omitted
            config: Coach configuration
        """
        self.config = config or CoachConfig()
        self.model = model if model is not None else self._load_model()

        # Performance tracking
        self.inference_times = []

    def _load_model(self) -> BasePoseModel:
        from ..models.mediapipe_model import MediaPipePose

        return MediaPipePose(
            model_complexity=self.config.model_complexity,
            min_detection_confidence=self.config.min_detection_confidence,
            min_tracking_confidence=self.config.min_tracking_confidence
        )

    def detect_poses(self, frame: np.ndarray) -> List[Pose]:
        """
        Detect poses in a single frame.

        Args:
            frame: BGR video frame

        Returns:
            Detected poses, possibly empty

        Raises:
            PoseProviderFailure: if the model fails or returns a malformed pose
        """
        start_time = time.perf_counter()
        try:
            poses = self.model.predict_poses(frame)
        except Exception as e:
            raise PoseProviderFailure(f"Pose inference failed: {e}") from e
        self.inference_times.append(time.perf_counter() - start_time)
        if len(self.inference_times) > 100:
            self.inference_times.pop(0)

        try:
            return [p if isinstance(p, Pose) else Pose.from_keypoints(p) for p in poses]
        except InvalidPose as e:
            raise PoseProviderFailure(str(e)) from e

    def get_performance_stats(self) -> Dict[str, float]:
        """Get performance statistics."""
        if not self.inference_times:
            return {}

        return {
            'avg_inference_time': float(np.mean(self.inference_times)),
            'min_inference_time': float(np.min(self.inference_times)),
            'max_inference_time': float(np.max(self.inference_times)),
            'fps': 1.0 / float(np.mean(self.inference_times))
        }

    def get_model_info(self) -> Dict[str, Any]:
        return self.model.get_model_info()

    def close(self):
        self.model.close()
