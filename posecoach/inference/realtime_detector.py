"""
Real-time exercise coaching from a webcam or video stream.
"""

import argparse
import logging
import sys
from typing import Optional

import cv2

from ..applications.coach import FitnessCoach
from ..applications.registry import ExerciseRegistry
from ..config import CoachConfig, Clock, monotonic_ms, AI_FPS, DEFAULT_EXERCISE
from ..errors import UnknownExercise, UnknownRoutine
from .detector import PoseDetector
from .processing import PoseProcessor
from .visualization import render_overlay


logger = logging.getLogger(__name__)

# Keyboard controls
KEY_QUIT = ord('q')
KEY_NEXT = ord('n')
KEY_PREV = ord('p')
KEY_WARMUP = ord('w')
KEY_STRETCH = ord('s')
KEY_STOP = ord('x')


class RealtimeCoach:
    """Camera loop: redraws every frame, runs pose inference at a fixed rate."""

    def __init__(
        self,
        config: Optional[CoachConfig] = None,
        detector: Optional[PoseDetector] = None,
        clock: Clock = monotonic_ms
    ):
        """
        Initialize real-time coach.

        Args:
            config: Coach configuration
            detector: Pose detector; MediaPipe is used if omitted
            clock: Clock returning milliseconds
        """
        self.config = config or CoachConfig()
        self.clock = clock
        self.coach = FitnessCoach(clock=clock, default_exercise=self.config.default_exercise)
        self.detector = detector or PoseDetector(config=self.config)
        self.processor = PoseProcessor(self.coach, self.detector, self.config.ai_fps)
        self.coach.scheduler.on_complete = self._on_routine_complete

        self.cap = None
        self.is_running = False

    def start_camera(self, source=None) -> bool:
        """Open the camera or a video file."""
        self.cap = cv2.VideoCapture(self.config.camera_id if source is None else source)
        if not self.cap.isOpened():
            logger.error("Could not open video source %s", source or self.config.camera_id)
            return False

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.video_width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.video_height)
        return True

    def stop_camera(self):
        if self.cap:
            self.cap.release()
            self.cap = None

    def run(self, source=None, display: bool = True):
        """
        Run the coaching loop until the stream ends or 'q' is pressed.

        Args:
            source: Video file path; the configured camera if None
            display: Whether to show the annotated video
        """
        if not self.start_camera(source):
            return

        self.is_running = True
        logger.info("Coaching %s. Press 'q' to quit.", self.coach.registry.current_name)

        try:
            while self.is_running:
                ret, frame = self.cap.read()
                if not ret:
                    break

                frame = cv2.resize(frame, self.config.resolution)
                if self.config.mirror:
                    frame = cv2.flip(frame, 1)

                self.processor.process(frame, self.clock())

                if display:
                    render_overlay(frame, self.processor.last_pose, self.coach.display_state())
                    cv2.imshow(self.config.window_name, frame)
                    if not self._handle_key(cv2.waitKey(1) & 0xFF):
                        break

        except KeyboardInterrupt:
            logger.info("Interrupted by user")

        finally:
            self.is_running = False
            self.stop_camera()
            self.detector.close()
            if display:
                cv2.destroyAllWindows()

    def _handle_key(self, key: int) -> bool:
        """Apply a keyboard command; False stops the loop."""
        if key == KEY_QUIT:
            return False
        if key in (KEY_NEXT, KEY_PREV):
            self._cycle_exercise(1 if key == KEY_NEXT else -1)
        elif key == KEY_WARMUP:
            self._start_routine('warmup')
        elif key == KEY_STRETCH:
            self._start_routine('stretch')
        elif key == KEY_STOP:
            self.coach.routine_stop()
        return True

    def _cycle_exercise(self, step: int):
        if self.coach.scheduler.is_active:
            return
        options = self.coach.get_options()
        index = options.index(self.coach.registry.current_name)
        self.coach.switch_to(options[(index + step) % len(options)])

    def _start_routine(self, routine_id: str):
        try:
            self.coach.routine_start(routine_id)
        except UnknownRoutine as e:
            logger.warning("%s", e)

    def _on_routine_complete(self, event):
        logger.info("Routine Complete! (%s)", event.routine_id)


def main(argv=None):
    """Main function for command-line usage."""
    parser = argparse.ArgumentParser(description='Real-time Exercise Coach')
    parser.add_argument('--camera', type=int, default=0,
                       help='Camera ID')
    parser.add_argument('--video', type=str, default=None,
                       help='Process video file instead of webcam')
    parser.add_argument('--resolution', type=int, nargs=2, default=[640, 480],
                       help='Video resolution (width height)')
    parser.add_argument('--fps', type=int, default=AI_FPS,
                       help='Pose processing rate (Hz)')
    parser.add_argument('--model-complexity', type=int, default=1, choices=[0, 1, 2],
                       help='MediaPipe model complexity')
    parser.add_argument('--confidence', type=float, default=0.5,
                       help='MediaPipe detection confidence')
    parser.add_argument('--exercise', type=str, default=DEFAULT_EXERCISE,
                       help='Exercise to start with')
    parser.add_argument('--routine', type=str, default=None,
                       help='Start a guided routine (warmup, stretch)')
    parser.add_argument('--no-mirror', action='store_true',
                       help='Do not mirror the camera image')
    parser.add_argument('--list', action='store_true',
                       help='List exercises and exit')
    parser.add_argument('--verbose', action='store_true',
                       help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    if args.list:
        for name in ExerciseRegistry().list_names():
            print(ExerciseRegistry.display_name(name))
        return 0

    config = CoachConfig.from_args(args)
    try:
        coach = RealtimeCoach(config)
    except UnknownExercise as e:
        parser.error(str(e))

    if args.routine:
        try:
            coach.coach.routine_start(args.routine)
        except UnknownRoutine as e:
            parser.error(str(e))

    coach.run(source=args.video)
    return 0


if __name__ == '__main__':
    sys.exit(main())
