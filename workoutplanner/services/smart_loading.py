"""Load a workout session with its sets without per-exercise fan-out.

Each exercise only ever has sets of the variant matching its catalog
type, so the planner groups exercise ids by that type and reads each
variant table at most once. The query count is ``1 + len(variants)``
regardless of how many exercises the session holds.
"""
from collections import defaultdict
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from workoutplanner.core.logging import get_logger
from workoutplanner.domain.sets import SetVariant
from workoutplanner.models.enums import ExerciseType
from workoutplanner.models.workout import WorkoutExercise, WorkoutSession
from workoutplanner.repositories.set_repository import SetRepository, to_variant
from workoutplanner.repositories.workout_session_repository import WorkoutSessionRepository

logger = get_logger(__name__)


@dataclass
class LoadedExercise:
    workout_exercise: WorkoutExercise
    strength_sets: list[SetVariant] = field(default_factory=list)
    cardio_sets: list[SetVariant] = field(default_factory=list)
    flexibility_sets: list[SetVariant] = field(default_factory=list)

    @property
    def set_type(self) -> ExerciseType:
        return ExerciseType(self.workout_exercise.exercise.type)

    def sets_for(self, kind: ExerciseType) -> list[SetVariant]:
        match kind:
            case ExerciseType.STRENGTH:
                return self.strength_sets
            case ExerciseType.CARDIO:
                return self.cardio_sets
            case ExerciseType.FLEXIBILITY:
                return self.flexibility_sets
        raise ValueError(f"Unknown set type {kind}")

    @property
    def sets(self) -> list[SetVariant]:
        return self.sets_for(self.set_type)


@dataclass
class LoadedSession:
    workout: WorkoutSession
    exercises: list[LoadedExercise]


class SmartLoadingPlanner:
    def __init__(self, session: AsyncSession):
        self._session = session
        self._workouts = WorkoutSessionRepository(session)

    async def load(self, workout_session_id: int) -> LoadedSession | None:
        workout = await self._workouts.get_with_exercises(workout_session_id)
        if workout is None:
            return None
        return await self.attach_sets(workout, list(workout.active_exercises))

    async def attach_sets(
        self, workout: WorkoutSession, exercises: list[WorkoutExercise]
    ) -> LoadedSession:
        loaded = [LoadedExercise(we) for we in exercises]
        by_id = {item.workout_exercise.id: item for item in loaded}

        buckets: dict[ExerciseType, list[int]] = defaultdict(list)
        for item in loaded:
            buckets[item.set_type].append(item.workout_exercise.id)

        for kind, exercise_ids in buckets.items():
            rows = await SetRepository(self._session, kind).list_by_exercises(exercise_ids)
            for row in rows:
                by_id[row.workout_exercise_id].sets_for(kind).append(to_variant(row))

        logger.debug(
            "workout_session_smart_loaded",
            workout_session_id=workout.id,
            exercise_count=len(loaded),
            variant_queries=len(buckets),
        )
        return LoadedSession(workout=workout, exercises=loaded)

    async def load_full(self, workout_session_id: int) -> LoadedSession | None:
        """Read every variant table for every exercise.

        Issues ``1 + 3E`` queries; kept for callers that want all three
        collections populated from storage rather than inferred empty.
        """
        workout = await self._workouts.get_with_exercises(workout_session_id)
        if workout is None:
            return None

        loaded = []
        for we in workout.active_exercises:
            item = LoadedExercise(we)
            for kind in ExerciseType:
                rows = await SetRepository(self._session, kind).list_by_exercise(we.id)
                item.sets_for(kind).extend(to_variant(row) for row in rows)
            loaded.append(item)

        logger.debug(
            "workout_session_fully_loaded",
            workout_session_id=workout.id,
            exercise_count=len(loaded),
        )
        return LoadedSession(workout=workout, exercises=loaded)
