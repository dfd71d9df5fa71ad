"""Shared pose builders and a controllable clock."""

import math

import pytest

from posecoach.data.keypoints import Keypoint, Pose, NUM_KEYPOINTS


DEFAULT_POINT = (320.0, 240.0)
DEFAULT_SCORE = 0.9


def make_pose(points=None, score=DEFAULT_SCORE, scores=None):
    """
    Build a pose from sparse overrides.

    Args:
        points: {index: (x, y)}; unspecified keypoints sit at DEFAULT_POINT
        score: Score for every keypoint
        scores: {index: score} overrides
    """
    points = points or {}
    scores = scores or {}
    keypoints = []
    for i in range(NUM_KEYPOINTS):
        x, y = points.get(i, DEFAULT_POINT)
        keypoints.append(Keypoint(float(x), float(y), scores.get(i, score)))
    return Pose(tuple(keypoints))


def joint_points(theta, vertex=(300.0, 300.0), length=100.0):
    """Three points whose angle at the vertex is theta degrees."""
    vx, vy = vertex
    a = (vx, vy - length)
    phi = math.radians(theta - 90.0)
    c = (vx + length * math.cos(phi), vy + length * math.sin(phi))
    return a, (vx, vy), c


def angle_pose(indices, theta, score=DEFAULT_SCORE, extra=None):
    """Pose with the joint (a, vertex, c) at the given indices bent to theta."""
    a, b, c = joint_points(theta)
    points = dict(zip(indices, (a, b, c)))
    points.update(extra or {})
    return make_pose(points, score=score)


class FakeClock:
    """Clock in milliseconds driven by the test."""

    def __init__(self, start=0.0):
        self.now = float(start)

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now

    def set(self, ms):
        self.now = float(ms)


@pytest.fixture
def clock():
    return FakeClock()
