"""
Registry owning one state machine per exercise name.
"""

import logging
from typing import Dict, Iterable, List, Optional, Type

from ..config import Clock, DEFAULT_EXERCISE, monotonic_ms
from ..errors import UnknownExercise
from .exercises import EXERCISE_CLASSES, Exercise


logger = logging.getLogger(__name__)


class ExerciseRegistry:
    """Fixed mapping from exercise name to a pre-constructed exercise."""

    def __init__(
        self,
        clock: Clock = monotonic_ms,
        default_exercise: str = DEFAULT_EXERCISE,
        exercise_classes: Iterable[Type[Exercise]] = EXERCISE_CLASSES
    ):
        """
        Initialize registry.

        Args:
            clock: Clock handed to every exercise (milliseconds)
            default_exercise: Name of the initially active exercise
            exercise_classes: Exercise types to register, in display order
        """
        self._exercises: Dict[str, Exercise] = {}
        for exercise_cls in exercise_classes:
            self._exercises[exercise_cls.name] = exercise_cls(clock=clock)

        if default_exercise not in self._exercises:
            raise UnknownExercise(default_exercise)
        self.default_exercise = default_exercise
        self._current_name = default_exercise

    @property
    def current_name(self) -> str:
        return self._current_name

    def get_current(self) -> Exercise:
        """Get the active exercise."""
        return self._exercises[self._current_name]

    def get(self, name: str) -> Exercise:
        if name not in self._exercises:
            raise UnknownExercise(name)
        return self._exercises[name]

    def switch_to(self, name: str):
        """
        Activate and reset an exercise.

        Args:
            name: Exercise name

        Raises:
            UnknownExercise: if the name is not registered; the active
                exercise is left untouched
        """
        exercise = self._exercises.get(name)
        if exercise is None:
            logger.warning("Exercise not found: %s", name)
            raise UnknownExercise(name)

        self._current_name = name
        exercise.reset()
        logger.info("Switched to %s", name)

    def reset_to_default(self):
        self.switch_to(self.default_exercise)

    def list_names(self) -> List[str]:
        """All exercise names in registration order."""
        return list(self._exercises)

    @staticmethod
    def display_name(name: str) -> str:
        """Option label shown in the selection UI."""
        return name[:1].upper() + name[1:]

    def __contains__(self, name: Optional[str]) -> bool:
        return name in self._exercises

    def __len__(self) -> int:
        return len(self._exercises)
