"""
Pose Coach Package

Pose-driven exercise recognition: per-exercise state machines that turn a
stream of COCO body keypoints into rep counts, hold timers and feedback, plus
a routine scheduler for timed guided workouts.
"""

__version__ = "1.0.0"
__author__ = "Human Pose Estimation Team"
