"""
Application context tying the exercise registry and routine scheduler to the
pose stream.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from ..config import Clock, DEFAULT_EXERCISE, monotonic_ms
from ..data.keypoints import Pose
from .exercises import Exercise, ExerciseKind
from .registry import ExerciseRegistry
from .routines import RoutineComplete, RoutineScheduler


logger = logging.getLogger(__name__)

# Statuses drawn with the highlight colour
ACTIVE_PHASES = ('down', 'star', 'in')
POSITIVE_FEEDBACK_WORDS = ('Good', 'Hold', 'Burn')


@dataclass(frozen=True)
class DisplayState:
    """What the renderer shows for the current cycle."""
    exercise_name: str
    count: Union[int, float]
    status: str
    feedback: str
    kind: ExerciseKind
    routine_label: Optional[str] = None
    remaining_seconds: Optional[int] = None

    @property
    def routine_active(self) -> bool:
        return self.routine_label is not None

    @property
    def title(self) -> str:
        return (self.routine_label or self.exercise_name).upper()

    @property
    def display_value(self) -> str:
        if self.routine_active:
            return f"{self.remaining_seconds} s"
        if self.kind is ExerciseKind.HOLD:
            return f"{self.count} s"
        return str(self.count)

    @property
    def is_active_phase(self) -> bool:
        return self.status in ACTIVE_PHASES

    @property
    def is_positive_feedback(self) -> bool:
        return any(word in self.feedback for word in POSITIVE_FEEDBACK_WORDS)


class FitnessCoach:
    """
    Single owner of all exercise and routine state.

    Constructed once and handed to the processing loop and the control
    surface.
    """

    def __init__(
        self,
        clock: Clock = monotonic_ms,
        default_exercise: str = DEFAULT_EXERCISE
    ):
        """
        Initialize coach.

        Args:
            clock: Clock returning milliseconds, shared by holds and routines
            default_exercise: Exercise active at start and after a routine
        """
        self.clock = clock
        self.registry = ExerciseRegistry(clock=clock, default_exercise=default_exercise)
        self.scheduler = RoutineScheduler(self.registry)
        self.last_completed: Optional[RoutineComplete] = None

    @property
    def current_exercise(self) -> Exercise:
        return self.registry.get_current()

    # --- control surface ---

    def switch_to(self, name: str):
        self.registry.switch_to(name)

    def get_options(self) -> List[str]:
        return self.registry.list_names()

    def routine_start(self, routine_id: str):
        self.scheduler.start(routine_id, self.clock())

    def routine_stop(self):
        self.scheduler.stop()

    # --- pose stream ---

    def process_poses(self, poses: Sequence[Pose]) -> Optional[RoutineComplete]:
        """
        Feed one processed cycle of poses.

        Only the first pose is used. An empty cycle carries no information
        and leaves every state untouched.

        Args:
            poses: Poses detected in this cycle

        Returns:
            RoutineComplete if the active routine finished this cycle
        """
        if not poses:
            return None

        pose = poses[0]
        # routine first, so a step change applies to this same pose
        completed = self.scheduler.tick(self.clock())
        if completed is not None:
            self.last_completed = completed
        self.registry.get_current().update(pose)
        return completed

    def display_state(self) -> DisplayState:
        """Read-only view for the renderer."""
        exercise = self.registry.get_current()
        step = self.scheduler.current_step
        return DisplayState(
            exercise_name=self.registry.current_name,
            count=exercise.count,
            status=exercise.status,
            feedback=exercise.feedback,
            kind=exercise.kind,
            routine_label=step.label if step else None,
            remaining_seconds=self.scheduler.remaining_seconds if step else None
        )
