from workoutplanner.models.enums import (
    DifficultyLevel,
    ExerciseType,
    TargetMuscleGroup,
    UserRole,
    WorkoutAction,
    WorkoutStatus,
)
from workoutplanner.models.exercise import Exercise
from workoutplanner.models.sets import SET_MODELS, CardioSet, FlexibilitySet, SetModel, StrengthSet
from workoutplanner.models.user import User
from workoutplanner.models.workout import WorkoutExercise, WorkoutSession

__all__ = [
    "CardioSet",
    "DifficultyLevel",
    "Exercise",
    "ExerciseType",
    "FlexibilitySet",
    "SET_MODELS",
    "SetModel",
    "StrengthSet",
    "TargetMuscleGroup",
    "User",
    "UserRole",
    "WorkoutAction",
    "WorkoutExercise",
    "WorkoutSession",
    "WorkoutStatus",
]
