from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.orm import joinedload

from workoutplanner.models.sets import SET_MODELS
from workoutplanner.models.workout import WorkoutExercise
from workoutplanner.repositories.base import SoftDeleteRepository


class WorkoutExerciseRepository(SoftDeleteRepository[WorkoutExercise]):
    model = WorkoutExercise

    async def get_with_catalog(self, id: int) -> WorkoutExercise | None:
        result = await self._session.execute(
            self._select()
            .options(joinedload(WorkoutExercise.exercise))
            .where(WorkoutExercise.id == id)
        )
        return result.scalar_one_or_none()

    async def list_by_session(self, workout_session_id: int) -> list[WorkoutExercise]:
        result = await self._session.execute(
            self._select()
            .options(joinedload(WorkoutExercise.exercise))
            .where(WorkoutExercise.workout_session_id == workout_session_id)
            .order_by(WorkoutExercise.order_in_workout, WorkoutExercise.id)
        )
        return list(result.scalars().all())

    async def count_by_session(self, workout_session_id: int) -> int:
        result = await self._session.execute(
            select(func.count())
            .select_from(WorkoutExercise)
            .where(
                WorkoutExercise.workout_session_id == workout_session_id,
                WorkoutExercise.deleted.is_(False),
            )
        )
        return result.scalar_one()

    async def order_taken(
        self, workout_session_id: int, order_in_workout: int, exclude_id: int | None = None
    ) -> bool:
        query = select(WorkoutExercise.id).where(
            WorkoutExercise.workout_session_id == workout_session_id,
            WorkoutExercise.order_in_workout == order_in_workout,
            WorkoutExercise.deleted.is_(False),
        )
        if exclude_id is not None:
            query = query.where(WorkoutExercise.id != exclude_id)
        result = await self._session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def cascade_soft_delete(self, workout_exercise: WorkoutExercise, when: datetime) -> None:
        """Mark the exercise's active sets deleted; the exercise row is left to the caller."""
        for set_model in SET_MODELS.values():
            await self._session.execute(
                update(set_model)
                .where(
                    set_model.workout_exercise_id == workout_exercise.id,
                    set_model.deleted.is_(False),
                )
                .values(deleted=True, deleted_at=when, version=set_model.version + 1)
                .execution_options(synchronize_session=False)
            )
