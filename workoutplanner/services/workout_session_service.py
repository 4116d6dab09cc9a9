"""Operations on the workout aggregate: sessions and their exercises."""
from datetime import datetime

from workoutplanner.config.settings import get_settings
from workoutplanner.core.concurrency import ensure_version, flush_versioned
from workoutplanner.core.exceptions import (
    AuthorizationError,
    BusinessRuleError,
    ConflictError,
    ValidationError,
)
from workoutplanner.core.logging import get_logger
from workoutplanner.core.transactions import transactional
from workoutplanner.models.enums import WorkoutAction, WorkoutStatus
from workoutplanner.models.workout import WorkoutExercise, WorkoutSession
from workoutplanner.repositories.exercise_repository import ExerciseRepository
from workoutplanner.repositories.workout_exercise_repository import WorkoutExerciseRepository
from workoutplanner.repositories.workout_session_repository import WorkoutSessionRepository
from workoutplanner.schemas.pagination import PaginatedResult, PaginationParams
from workoutplanner.schemas.workout import (
    AddWorkoutExerciseRequest,
    CreateWorkoutRequest,
    UpdateWorkoutExerciseRequest,
    UpdateWorkoutRequest,
)
from workoutplanner.security.access import AccessContext, ensure_owner_or_admin
from workoutplanner.services.base import BaseService
from workoutplanner.services.smart_loading import LoadedSession, SmartLoadingPlanner
from workoutplanner.services.status_transitions import apply_action, duration_minutes

logger = get_logger(__name__)


class WorkoutSessionService(BaseService):
    def __init__(self, session, settings=None):
        super().__init__(session)
        self._settings = settings or get_settings()
        self._workouts = WorkoutSessionRepository(session)
        self._workout_exercises = WorkoutExerciseRepository(session)
        self._catalog = ExerciseRepository(session)
        self._planner = SmartLoadingPlanner(session)

    # ============== Sessions ==============

    async def _load_workout(
        self, ctx: AccessContext, workout_id: int, include_deleted: bool = False
    ) -> WorkoutSession:
        workout = self._require(
            await self._workouts.get(workout_id, include_deleted=include_deleted),
            "WorkoutSession",
            workout_id,
        )
        ensure_owner_or_admin(ctx, workout.user_id, "WorkoutSession", workout_id)
        return workout

    @transactional
    async def create(self, ctx: AccessContext, request: CreateWorkoutRequest) -> WorkoutSession:
        workout = WorkoutSession(
            user_id=ctx.user_id,
            name=request.name.strip(),
            description=request.description,
            notes=request.notes,
            status=WorkoutStatus.PLANNED,
            version=0,
        )
        await self._workouts.create(workout)
        logger.info(
            "workout_session_created",
            workout_session_id=workout.id,
            user_id=workout.user_id,
            version=workout.version,
        )
        return workout

    async def get(self, ctx: AccessContext, workout_id: int) -> WorkoutSession:
        workout = await self._load_workout(ctx, workout_id)
        logger.debug("workout_session_read", workout_session_id=workout_id)
        return workout

    async def get_with_smart_loaded_sets(self, ctx: AccessContext, workout_id: int) -> LoadedSession:
        loaded = self._require(
            await self._planner.load(workout_id), "WorkoutSession", workout_id
        )
        ensure_owner_or_admin(ctx, loaded.workout.user_id, "WorkoutSession", workout_id)
        return loaded

    async def get_with_all_sets(self, ctx: AccessContext, workout_id: int) -> LoadedSession:
        loaded = self._require(
            await self._planner.load_full(workout_id), "WorkoutSession", workout_id
        )
        ensure_owner_or_admin(ctx, loaded.workout.user_id, "WorkoutSession", workout_id)
        return loaded

    async def list_by_owner(
        self,
        ctx: AccessContext,
        pagination: PaginationParams,
        owner_id: int | None = None,
        status: WorkoutStatus | None = None,
    ) -> PaginatedResult[WorkoutSession]:
        owner_id = ctx.user_id if owner_id is None else owner_id
        if not ctx.can_access(owner_id):
            raise AuthorizationError(
                f"Not allowed to list workout sessions of user {owner_id}",
                details={"resource": "WorkoutSession", "owner_id": owner_id},
            )
        filter = {"user_id": owner_id}
        if status is not None:
            filter["status"] = status
        return await self._workouts.list(filter, pagination)

    @transactional
    async def update(
        self, ctx: AccessContext, workout_id: int, request: UpdateWorkoutRequest
    ) -> WorkoutSession:
        workout = await self._load_workout(ctx, workout_id)
        ensure_version(workout, "WorkoutSession", request.version)

        changes = request.changes()
        started_at = changes.get("started_at", workout.started_at)
        completed_at = changes.get("completed_at", workout.completed_at)
        self._validate_dates(workout, changes, started_at, completed_at)

        for field in ("name", "description", "notes"):
            if field in changes:
                value = changes[field]
                setattr(workout, field, value.strip() if field == "name" and value else value)
        workout.started_at = started_at
        workout.completed_at = completed_at
        if "actual_duration_minutes" in changes:
            workout.actual_duration_minutes = changes["actual_duration_minutes"]
        elif {"started_at", "completed_at"} & changes.keys() and completed_at is not None:
            workout.actual_duration_minutes = duration_minutes(started_at, completed_at)

        await flush_versioned(self._session, workout, "WorkoutSession")
        logger.info(
            "workout_session_updated",
            workout_session_id=workout.id,
            fields=sorted(changes),
            version=workout.version,
        )
        return workout

    def _validate_dates(
        self,
        workout: WorkoutSession,
        changes: dict,
        started_at: datetime | None,
        completed_at: datetime | None,
    ) -> None:
        now = datetime.utcnow()
        status = WorkoutStatus(workout.status)

        if "started_at" in changes and status == WorkoutStatus.PLANNED and started_at is not None:
            raise ValidationError("started_at", "cannot be set before the session is started")
        if "completed_at" in changes and status != WorkoutStatus.COMPLETED and completed_at is not None:
            raise ValidationError("completed_at", "can only be set on a completed session")
        if "actual_duration_minutes" in changes and status != WorkoutStatus.COMPLETED:
            raise ValidationError("actual_duration_minutes", "can only be set on a completed session")
        if status != WorkoutStatus.PLANNED and started_at is None:
            raise ValidationError("started_at", "cannot be cleared once the session has started")
        if status == WorkoutStatus.COMPLETED and completed_at is None:
            raise ValidationError("completed_at", "cannot be cleared on a completed session")

        if started_at is not None and started_at > now:
            raise ValidationError("started_at", "Workout session cannot start in the future")
        if completed_at is not None and completed_at > now:
            raise ValidationError("completed_at", "Workout session cannot be completed in the future")
        if started_at is not None and completed_at is not None and completed_at < started_at:
            raise ValidationError("completed_at", "Workout session cannot be completed before it starts")

    @transactional
    async def delete(
        self, ctx: AccessContext, workout_id: int, expected_version: int | None = None
    ) -> None:
        """Soft-delete the session together with its exercises and their sets."""
        workout = await self._load_workout(ctx, workout_id)
        ensure_version(workout, "WorkoutSession", expected_version)

        now = datetime.utcnow()
        await self._workouts.cascade_soft_delete(workout, now)
        workout.soft_delete(now)
        await flush_versioned(self._session, workout, "WorkoutSession")
        logger.info(
            "workout_session_deleted",
            workout_session_id=workout.id,
            deleted_by=ctx.user_id,
            version=workout.version,
        )

    @transactional
    async def restore(self, ctx: AccessContext, workout_id: int) -> WorkoutSession:
        """Undo a soft delete, bringing back the children removed with it."""
        workout = await self._load_workout(ctx, workout_id, include_deleted=True)
        if workout.is_active:
            raise BusinessRuleError(
                "Workout session is not deleted and cannot be restored",
                details={"entity": "WorkoutSession", "id": workout_id},
            )

        deleted_at = workout.deleted_at
        await self._workouts.cascade_restore(workout, deleted_at)
        workout.restore()
        await flush_versioned(self._session, workout, "WorkoutSession")
        logger.info(
            "workout_session_restored",
            workout_session_id=workout.id,
            restored_by=ctx.user_id,
            version=workout.version,
        )
        return workout

    @transactional
    async def perform_action(
        self,
        ctx: AccessContext,
        workout_id: int,
        action: WorkoutAction | str,
        expected_version: int | None = None,
    ) -> WorkoutSession:
        workout = await self._load_workout(ctx, workout_id)
        ensure_version(workout, "WorkoutSession", expected_version)

        previous = apply_action(workout, action)
        await flush_versioned(self._session, workout, "WorkoutSession")
        logger.info(
            "workout_session_action_performed",
            workout_session_id=workout.id,
            action=str(getattr(action, "value", action)),
            from_status=previous.value,
            to_status=WorkoutStatus(workout.status).value,
            version=workout.version,
        )
        return workout

    # ============== Exercises in a session ==============

    async def _load_workout_exercise(
        self, ctx: AccessContext, workout_exercise_id: int
    ) -> tuple[WorkoutExercise, WorkoutSession]:
        workout_exercise = self._require(
            await self._workout_exercises.get_with_catalog(workout_exercise_id),
            "WorkoutExercise",
            workout_exercise_id,
        )
        workout = await self._load_workout(ctx, workout_exercise.workout_session_id)
        return workout_exercise, workout

    async def _ensure_order_free(
        self, workout_id: int, order_in_workout: int, exclude_id: int | None = None
    ) -> None:
        if await self._workout_exercises.order_taken(workout_id, order_in_workout, exclude_id):
            raise ConflictError(
                f"Position {order_in_workout} is already used in workout session {workout_id}",
                code="CF_EXERCISE_ORDER",
                details={
                    "entity": "WorkoutExercise",
                    "workout_session_id": workout_id,
                    "order_in_workout": order_in_workout,
                },
            )

    @transactional
    async def add_exercise(
        self, ctx: AccessContext, workout_id: int, request: AddWorkoutExerciseRequest
    ) -> WorkoutExercise:
        workout = await self._load_workout(ctx, workout_id)
        catalog_entry = self._require(
            await self._catalog.get(request.exercise_id), "Exercise", request.exercise_id
        )

        limit = self._settings.max_exercises_per_session
        if await self._workout_exercises.count_by_session(workout.id) >= limit:
            raise BusinessRuleError(
                f"A workout session can hold at most {limit} exercises",
                details={"entity": "WorkoutSession", "id": workout.id, "limit": limit},
            )
        await self._ensure_order_free(workout.id, request.order_in_workout)

        workout_exercise = WorkoutExercise(
            workout_session_id=workout.id,
            exercise_id=catalog_entry.id,
            order_in_workout=request.order_in_workout,
            notes=request.notes,
            version=0,
        )
        workout_exercise.exercise = catalog_entry
        await self._workout_exercises.create(workout_exercise)
        logger.info(
            "workout_exercise_added",
            workout_session_id=workout.id,
            workout_exercise_id=workout_exercise.id,
            exercise_id=catalog_entry.id,
            exercise_type=catalog_entry.type.value,
        )
        return workout_exercise

    async def list_exercises(self, ctx: AccessContext, workout_id: int) -> list[WorkoutExercise]:
        workout = await self._load_workout(ctx, workout_id)
        return await self._workout_exercises.list_by_session(workout.id)

    async def get_exercise(self, ctx: AccessContext, workout_exercise_id: int) -> WorkoutExercise:
        workout_exercise, _ = await self._load_workout_exercise(ctx, workout_exercise_id)
        return workout_exercise

    @transactional
    async def update_exercise(
        self,
        ctx: AccessContext,
        workout_exercise_id: int,
        request: UpdateWorkoutExerciseRequest,
    ) -> WorkoutExercise:
        workout_exercise, workout = await self._load_workout_exercise(ctx, workout_exercise_id)
        ensure_version(workout_exercise, "WorkoutExercise", request.version)

        changes = request.changes()
        new_order = changes.get("order_in_workout")
        if new_order is not None and new_order != workout_exercise.order_in_workout:
            await self._ensure_order_free(workout.id, new_order, exclude_id=workout_exercise.id)
            workout_exercise.order_in_workout = new_order
        if "notes" in changes:
            workout_exercise.notes = changes["notes"]

        await flush_versioned(self._session, workout_exercise, "WorkoutExercise")
        logger.info(
            "workout_exercise_updated",
            workout_exercise_id=workout_exercise.id,
            fields=sorted(changes),
            version=workout_exercise.version,
        )
        return workout_exercise

    @transactional
    async def remove_exercise(
        self, ctx: AccessContext, workout_exercise_id: int, expected_version: int | None = None
    ) -> None:
        """Soft-delete the exercise and every set recorded under it."""
        workout_exercise, _ = await self._load_workout_exercise(ctx, workout_exercise_id)
        ensure_version(workout_exercise, "WorkoutExercise", expected_version)

        now = datetime.utcnow()
        await self._workout_exercises.cascade_soft_delete(workout_exercise, now)
        workout_exercise.soft_delete(now)
        await flush_versioned(self._session, workout_exercise, "WorkoutExercise")
        logger.info(
            "workout_exercise_removed",
            workout_exercise_id=workout_exercise.id,
            workout_session_id=workout_exercise.workout_session_id,
            version=workout_exercise.version,
        )
