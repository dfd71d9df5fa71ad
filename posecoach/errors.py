"""
Exception hierarchy for the exercise recognition engine.
"""


class PoseCoachError(Exception):
    """Base class for all pose coach errors."""


class InvalidPose(PoseCoachError, ValueError):
    """A pose does not have the 17-keypoint COCO layout."""


class UnknownExercise(PoseCoachError, ValueError):
    """Exercise name is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown exercise: {name}")
        self.name = name


class UnknownRoutine(PoseCoachError, ValueError):
    """Routine id is not in the routine catalog."""

    def __init__(self, routine_id: str):
        super().__init__(f"Unknown routine: {routine_id}")
        self.routine_id = routine_id


class PoseProviderFailure(PoseCoachError, RuntimeError):
    """The pose provider failed to produce a pose for a cycle."""
