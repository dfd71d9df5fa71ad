"""
Base class for pose providers.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

import numpy as np

from ..data.keypoints import Pose


class BasePoseModel(ABC):
    """Base class for all pose providers."""

    def __init__(self, num_keypoints: int = 17):
        """
        Initialize base model.

        Args:
            num_keypoints: Number of keypoints the model reports
        """
        self.num_keypoints = num_keypoints

    @abstractmethod
    def predict_poses(self, image: np.ndarray) -> List[Pose]:
        """
        Detect poses in a BGR image.

        Args:
            image: Input image [H, W, C]

        Returns:
            Detected poses in pixel coordinates, COCO order
        """

    def close(self):
        """Release model resources."""

    def get_model_info(self) -> Dict[str, Any]:
        return {
            'num_keypoints': self.num_keypoints,
            'model_class': type(self).__name__
        }
