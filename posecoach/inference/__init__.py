"""
Pose geometry and realtime inference modules.

The camera loop (``realtime_detector``), the pose provider adapter
(``detector``) and the OpenCV overlay (``visualization``) pull in OpenCV and
MediaPipe, so they are imported from their modules directly.
"""

from .utils import angle, distance, dominant_side, side_points, is_valid, SidePoints

__all__ = [
    'angle', 'distance', 'dominant_side', 'side_points', 'is_valid', 'SidePoints'
]
