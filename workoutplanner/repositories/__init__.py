from workoutplanner.repositories.base import Repository, SoftDeleteRepository
from workoutplanner.repositories.exercise_repository import ExerciseRepository
from workoutplanner.repositories.set_repository import SetRepository, apply_variant, to_variant
from workoutplanner.repositories.user_repository import UserRepository
from workoutplanner.repositories.workout_exercise_repository import WorkoutExerciseRepository
from workoutplanner.repositories.workout_session_repository import WorkoutSessionRepository

__all__ = [
    "ExerciseRepository",
    "Repository",
    "SetRepository",
    "SoftDeleteRepository",
    "UserRepository",
    "WorkoutExerciseRepository",
    "WorkoutSessionRepository",
    "apply_variant",
    "to_variant",
]
