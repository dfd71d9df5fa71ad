"""
Offline coaching demo: counts an exercise in a recorded video.

Video time drives the coach clock, so hold timers and routine countdowns
follow the recording rather than the processing speed.
"""

import argparse
import logging
import sys

import cv2

from posecoach.applications.coach import FitnessCoach
from posecoach.applications.registry import ExerciseRegistry
from posecoach.config import AI_FPS, CoachConfig
from posecoach.errors import UnknownExercise, UnknownRoutine
from posecoach.inference.detector import PoseDetector
from posecoach.inference.processing import PoseProcessor
from posecoach.inference.visualization import render_overlay


class VideoClock:
    """Clock reading the position of a capture in milliseconds."""

    def __init__(self, cap):
        self.cap = cap

    def __call__(self):
        return self.cap.get(cv2.CAP_PROP_POS_MSEC)


def main():
    """Main function for the video coaching demo."""
    parser = argparse.ArgumentParser(description='Video Exercise Coach Demo')
    parser.add_argument('video', type=str, help='Input video file')
    parser.add_argument('--exercise', type=str, default='squat',
                       help='Exercise to count')
    parser.add_argument('--routine', type=str, default=None,
                       help='Run a guided routine instead (warmup, stretch)')
    parser.add_argument('--fps', type=int, default=AI_FPS,
                       help='Pose processing rate (Hz)')
    parser.add_argument('--output', type=str, default=None,
                       help='Write the annotated video here')

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    print("Video Exercise Coach Demo")
    print("=" * 40)
    print(f"Video: {args.video}")
    print(f"Exercise: {ExerciseRegistry.display_name(args.exercise)}")
    print("=" * 40)

    cap = cv2.VideoCapture(args.video)
    if not cap.isOpened():
        print(f"Error: Could not open video {args.video}")
        return 1

    config = CoachConfig(default_exercise=args.exercise, ai_fps=args.fps, mirror=False)
    clock = VideoClock(cap)
    try:
        coach = FitnessCoach(clock=clock, default_exercise=args.exercise)
        if args.routine:
            coach.routine_start(args.routine)
    except (UnknownExercise, UnknownRoutine) as e:
        print(f"Error: {e}")
        cap.release()
        return 1

    detector = PoseDetector(config=config)
    processor = PoseProcessor(coach, detector, config.ai_fps)

    writer = None
    if args.output:
        fps = cap.get(cv2.CAP_PROP_FPS) or 30
        size = (int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)), int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)))
        writer = cv2.VideoWriter(args.output, cv2.VideoWriter_fourcc(*'mp4v'), fps, size)

    frames = 0
    try:
        while True:
            ret, frame = cap.read()
            if not ret:
                break
            frames += 1

            event = processor.process(frame, clock())
            if event is not None:
                print(f"Routine complete: {event.routine_id}")

            if writer is not None:
                render_overlay(frame, processor.last_pose, coach.display_state())
                writer.write(frame)
    finally:
        cap.release()
        detector.close()
        if writer is not None:
            writer.release()

    state = coach.display_state()
    print("\nResults:")
    print(f"  Frames: {frames}")
    print(f"  Failed cycles: {processor.failures}")
    print(f"  {ExerciseRegistry.display_name(state.exercise_name)}: {state.display_value}")
    print(f"  Last feedback: {state.feedback}")

    stats = detector.get_performance_stats()
    if stats:
        print(f"  Inference FPS: {stats['fps']:.1f}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
