"""
Routine scheduler for timed, guided workouts.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from ..config import ROUTINE_TICK_MS
from ..errors import UnknownExercise, UnknownRoutine
from .registry import ExerciseRegistry


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoutineStep:
    """One timed exercise within a routine."""
    exercise_name: str
    duration_seconds: int
    label: str


Routine = Tuple[RoutineStep, ...]


@dataclass
class RoutineRun:
    """Progress of a running routine."""
    routine_id: str
    steps: Routine
    current_index: int = 0
    remaining_seconds: int = 0
    last_tick_at: float = 0.0
    active: bool = True

    @property
    def current_step(self) -> Optional[RoutineStep]:
        if 0 <= self.current_index < len(self.steps):
            return self.steps[self.current_index]
        return None


@dataclass(frozen=True)
class RoutineComplete:
    """Emitted when the last step of a routine has run out."""
    routine_id: str
    completed_at: float


ROUTINES: Dict[str, Routine] = {
    'warmup': (
        RoutineStep('jumpingjack', 30, "Warm Up: Jacks"),
        RoutineStep('highknees', 30, "Warm Up: Knees"),
        RoutineStep('squat', 30, "Leg Activation"),
    ),
    'stretch': (
        RoutineStep('forwardfold', 20, "Hamstrings"),
        RoutineStep('sidestretch', 20, "Side Body"),
        RoutineStep('wallsit', 20, "Final Hold"),
    ),
}


class RoutineScheduler:
    """
    Steps through a routine using wall-clock deltas.

    ``tick`` is called once per processed pose frame. The countdown drops by
    one second whenever at least a second has passed since the last
    decrement, so irregular frame arrival does not skew the timer.
    """

    def __init__(
        self,
        registry: ExerciseRegistry,
        routines: Optional[Mapping[str, Routine]] = None,
        tick_ms: float = ROUTINE_TICK_MS
    ):
        """
        Initialize scheduler.

        Args:
            registry: Registry whose active exercise follows the routine
            routines: Routine catalog keyed by id
            tick_ms: Countdown resolution in milliseconds
        """
        self.registry = registry
        self.routines = dict(ROUTINES if routines is None else routines)
        self.tick_ms = tick_ms
        self.run: Optional[RoutineRun] = None

        self.on_complete: Optional[Callable[[RoutineComplete], None]] = None

    @property
    def is_active(self) -> bool:
        return self.run is not None and self.run.active

    @property
    def current_step(self) -> Optional[RoutineStep]:
        if not self.is_active:
            return None
        return self.run.current_step

    @property
    def remaining_seconds(self) -> Optional[int]:
        return self.run.remaining_seconds if self.is_active else None

    def list_routines(self) -> List[str]:
        return list(self.routines)

    def start(self, routine_id: str, now: float):
        """
        Start a routine and activate its first step.

        Args:
            routine_id: Routine catalog id
            now: Current instant in milliseconds

        Raises:
            UnknownRoutine: if the id is not in the catalog
            UnknownExercise: if any step names an unregistered exercise;
                the scheduler is left idle
        """
        if routine_id not in self.routines:
            logger.warning("Routine not found: %s", routine_id)
            raise UnknownRoutine(routine_id)

        steps = tuple(self.routines[routine_id])
        for step in steps:
            if step.exercise_name not in self.registry:
                logger.warning("Routine %s names unknown exercise %s",
                               routine_id, step.exercise_name)
                raise UnknownExercise(step.exercise_name)

        self.run = RoutineRun(routine_id=routine_id, steps=steps)
        logger.info("Starting routine %s (%d steps)", routine_id, len(steps))
        try:
            self._load_step(now)
        except UnknownExercise:
            self.run = None
            raise

    def stop(self):
        """Return to idle and switch back to the default exercise."""
        self.run = None
        self.registry.reset_to_default()

    def tick(self, now: float) -> Optional[RoutineComplete]:
        """
        Advance the countdown.

        Args:
            now: Current instant in milliseconds

        Returns:
            RoutineComplete when the routine finished on this tick
        """
        if not self.is_active:
            return None

        run = self.run
        if now - run.last_tick_at >= self.tick_ms:
            run.remaining_seconds -= 1
            run.last_tick_at = now

        if run.remaining_seconds <= 0:
            run.current_index += 1
            if run.current_index >= len(run.steps):
                return self._complete(now)
            self._load_step(now)
        return None

    def _load_step(self, now: float):
        run = self.run
        step = run.steps[run.current_index]
        run.remaining_seconds = step.duration_seconds
        run.last_tick_at = now
        self.registry.switch_to(step.exercise_name)
        logger.info("Routine %s step %d/%d: %s",
                    run.routine_id, run.current_index + 1, len(run.steps), step.label)

    def _complete(self, now: float) -> RoutineComplete:
        event = RoutineComplete(routine_id=self.run.routine_id, completed_at=now)
        self.stop()
        logger.info("Routine %s complete", event.routine_id)
        if self.on_complete:
            self.on_complete(event)
        return event
