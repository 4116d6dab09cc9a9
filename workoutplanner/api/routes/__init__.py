"""API routes module."""
from workoutplanner.api.routes.exercises import router as exercises_router
from workoutplanner.api.routes.health import router as health_router
from workoutplanner.api.routes.sets import router as sets_router
from workoutplanner.api.routes.workouts import router as workouts_router

__all__ = [
    "exercises_router",
    "health_router",
    "sets_router",
    "workouts_router",
]
