from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import joinedload

from workoutplanner.core.pagination import decode_cursor
from workoutplanner.models.sets import SET_MODELS
from workoutplanner.models.workout import WorkoutExercise, WorkoutSession
from workoutplanner.repositories.base import SoftDeleteRepository
from workoutplanner.schemas.pagination import PaginatedResult, PaginationParams


class WorkoutSessionRepository(SoftDeleteRepository[WorkoutSession]):
    model = WorkoutSession

    async def get_with_exercises(self, id: int) -> WorkoutSession | None:
        """Session plus its active exercises and their catalog entries in one SELECT."""
        result = await self._session.execute(
            self._select()
            .options(
                joinedload(WorkoutSession.active_exercises).joinedload(WorkoutExercise.exercise)
            )
            .where(WorkoutSession.id == id)
        )
        return result.unique().scalar_one_or_none()

    async def list(self, filter: dict, pagination: PaginationParams) -> PaginatedResult[WorkoutSession]:
        query = self._select()

        if "user_id" in filter:
            query = query.where(WorkoutSession.user_id == filter["user_id"])

        if "status" in filter:
            query = query.where(WorkoutSession.status == filter["status"])

        query = query.order_by(WorkoutSession.id.desc())

        if pagination.cursor:
            last_id = decode_cursor(pagination.cursor, "id")
            query = query.where(WorkoutSession.id < last_id)

        result = await self._session.execute(query.limit(pagination.fetch_size))
        return PaginatedResult.from_rows(list(result.scalars().all()), pagination)

    async def cascade_soft_delete(self, workout: WorkoutSession, when: datetime) -> None:
        """Mark the session's active exercises and sets deleted with ``when``.

        The session row itself is stamped by the caller so that its version
        check runs through the ORM flush.
        """
        exercise_ids = select(WorkoutExercise.id).where(
            WorkoutExercise.workout_session_id == workout.id
        )
        for set_model in SET_MODELS.values():
            await self._session.execute(
                update(set_model)
                .where(
                    set_model.workout_exercise_id.in_(exercise_ids),
                    set_model.deleted.is_(False),
                )
                .values(deleted=True, deleted_at=when, version=set_model.version + 1)
                .execution_options(synchronize_session=False)
            )
        await self._session.execute(
            update(WorkoutExercise)
            .where(
                WorkoutExercise.workout_session_id == workout.id,
                WorkoutExercise.deleted.is_(False),
            )
            .values(deleted=True, deleted_at=when, version=WorkoutExercise.version + 1)
            .execution_options(synchronize_session=False)
        )

    async def cascade_restore(self, workout: WorkoutSession, deleted_at: datetime) -> None:
        """Restore children that were deleted together with the session."""
        exercise_ids = select(WorkoutExercise.id).where(
            WorkoutExercise.workout_session_id == workout.id
        )
        await self._session.execute(
            update(WorkoutExercise)
            .where(
                WorkoutExercise.workout_session_id == workout.id,
                WorkoutExercise.deleted.is_(True),
                WorkoutExercise.deleted_at == deleted_at,
            )
            .values(deleted=False, deleted_at=None, version=WorkoutExercise.version + 1)
            .execution_options(synchronize_session=False)
        )
        for set_model in SET_MODELS.values():
            await self._session.execute(
                update(set_model)
                .where(
                    set_model.workout_exercise_id.in_(exercise_ids),
                    set_model.deleted.is_(True),
                    set_model.deleted_at == deleted_at,
                )
                .values(deleted=False, deleted_at=None, version=set_model.version + 1)
                .execution_options(synchronize_session=False)
            )
