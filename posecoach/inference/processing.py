"""
Throttled pose processing cycle.

Display refresh runs as fast as the host allows, pose inference only at a
fixed rate. Each processed cycle runs the detector once and feeds the result
to the coach; a failed inference is logged and the cycle skipped.
"""

import logging
from typing import Optional

import numpy as np

from ..applications.coach import FitnessCoach
from ..applications.routines import RoutineComplete
from ..data.keypoints import Pose
from ..errors import PoseProviderFailure
from .detector import PoseDetector


logger = logging.getLogger(__name__)


class FrameThrottle:
    """Lets a frame through at most once per interval."""

    def __init__(self, fps: float):
        self.interval_ms = 1000.0 / fps
        self.last_time: Optional[float] = None

    def ready(self, timestamp_ms: float) -> bool:
        """
        Check whether a frame at this timestamp should be processed.

        Marks the frame as processed when it is.
        """
        if self.last_time is None or timestamp_ms - self.last_time > self.interval_ms:
            self.last_time = timestamp_ms
            return True
        return False


class PoseProcessor:
    """Runs one throttled detection cycle against the coach."""

    def __init__(self, coach: FitnessCoach, detector: PoseDetector, fps: float):
        """
        Initialize processor.

        Args:
            coach: Application context receiving the poses
            detector: Pose provider boundary
            fps: Pose processing rate
        """
        self.coach = coach
        self.detector = detector
        self.throttle = FrameThrottle(fps)
        self.last_pose: Optional[Pose] = None
        self.failures = 0

    def process(self, frame: np.ndarray, timestamp_ms: float) -> Optional[RoutineComplete]:
        """
        Process a display frame if the throttle allows it.

        Args:
            frame: BGR video frame
            timestamp_ms: Display timestamp in milliseconds

        Returns:
            RoutineComplete if a routine finished during this cycle
        """
        if not self.throttle.ready(timestamp_ms):
            return None

        try:
            poses = self.detector.detect_poses(frame)
        except PoseProviderFailure as e:
            self.failures += 1
            logger.warning("Skipping cycle: %s", e)
            return None

        if poses:
            self.last_pose = poses[0]
        return self.coach.process_poses(poses)
