"""
Runtime configuration for the pose coach.
"""

import time
from dataclasses import dataclass
from typing import Callable


# =============================================================================
# Camera / display
# =============================================================================
VIDEO_WIDTH = 640
VIDEO_HEIGHT = 480
WINDOW_NAME = "Pose Coach"

# =============================================================================
# Pose processing
# =============================================================================
AI_FPS = 10                   # pose inference rate, independent of display refresh
CONFIDENCE_THRESHOLD = 0.3    # keypoint score floor used by the exercise gates
MODEL_COMPLEXITY = 1
MIN_DETECTION_CONFIDENCE = 0.5
MIN_TRACKING_CONFIDENCE = 0.5

# =============================================================================
# Exercises / routines
# =============================================================================
DEFAULT_EXERCISE = "squat"
ROUTINE_TICK_MS = 1000


# Clock returning the current instant in milliseconds
Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


@dataclass
class CoachConfig:
    """Configuration for the realtime coach loop."""
    camera_id: int = 0
    video_width: int = VIDEO_WIDTH
    video_height: int = VIDEO_HEIGHT
    ai_fps: int = AI_FPS
    model_complexity: int = MODEL_COMPLEXITY
    min_detection_confidence: float = MIN_DETECTION_CONFIDENCE
    min_tracking_confidence: float = MIN_TRACKING_CONFIDENCE
    default_exercise: str = DEFAULT_EXERCISE
    mirror: bool = True
    window_name: str = WINDOW_NAME

    @property
    def resolution(self):
        return (self.video_width, self.video_height)

    @property
    def processing_interval_ms(self) -> float:
        """Minimum spacing between two processed pose frames."""
        return 1000.0 / self.ai_fps

    @classmethod
    def from_args(cls, args) -> "CoachConfig":
        """Build a config from parsed command-line arguments."""
        return cls(
            camera_id=args.camera,
            video_width=args.resolution[0],
            video_height=args.resolution[1],
            ai_fps=args.fps,
            model_complexity=args.model_complexity,
            min_detection_confidence=args.confidence,
            default_exercise=args.exercise,
            mirror=not args.no_mirror,
        )
