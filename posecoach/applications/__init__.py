"""
Exercise recognition applications.

This module contains:
- Per-exercise rep and hold state machines
- The exercise registry
- The routine scheduler for guided workouts
- The FitnessCoach application context
"""

from .exercises import Exercise, ExerciseKind, ExerciseState, HingeExercise, HoldExercise
from .registry import ExerciseRegistry
from .routines import RoutineScheduler, RoutineStep, RoutineRun, RoutineComplete, ROUTINES
from .coach import FitnessCoach, DisplayState

__all__ = [
    'Exercise', 'ExerciseKind', 'ExerciseState', 'HingeExercise', 'HoldExercise',
    'ExerciseRegistry',
    'RoutineScheduler', 'RoutineStep', 'RoutineRun', 'RoutineComplete', 'ROUTINES',
    'FitnessCoach', 'DisplayState'
]
