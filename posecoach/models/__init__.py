"""
Pose provider implementations.

``MediaPipePose`` needs MediaPipe and OpenCV and is imported from
``posecoach.models.mediapipe_model``.
"""

from .base_model import BasePoseModel

__all__ = ['BasePoseModel']
