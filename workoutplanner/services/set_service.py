"""CRUD for sets of one variant under an exercise in a session.

The service is built for a single variant; the HTTP layer picks it from
the path, and every write is rejected unless that variant equals the
catalog type of the parent exercise.
"""
from datetime import datetime

from workoutplanner.config.settings import get_settings
from workoutplanner.core.concurrency import ensure_version, flush_versioned
from workoutplanner.core.exceptions import BusinessRuleError, ConflictError
from workoutplanner.core.logging import get_logger
from workoutplanner.core.transactions import transactional
from workoutplanner.domain.sets import SetVariant, validate
from workoutplanner.models.enums import ExerciseType
from workoutplanner.models.sets import SetModel
from workoutplanner.models.workout import WorkoutExercise
from workoutplanner.repositories.set_repository import SetRepository, apply_variant, to_variant
from workoutplanner.repositories.workout_exercise_repository import WorkoutExerciseRepository
from workoutplanner.repositories.workout_session_repository import WorkoutSessionRepository
from workoutplanner.security.access import AccessContext, ensure_owner_or_admin
from workoutplanner.services.base import BaseService

logger = get_logger(__name__)


class SetService(BaseService):
    def __init__(self, session, set_type: ExerciseType, settings=None):
        super().__init__(session)
        self.set_type = ExerciseType(set_type)
        self._settings = settings or get_settings()
        self._sets = SetRepository(session, self.set_type)
        self._workout_exercises = WorkoutExerciseRepository(session)
        self._workouts = WorkoutSessionRepository(session)

    @property
    def _entity(self) -> str:
        return f"{self.set_type.value.capitalize()}Set"

    async def _load_parent(self, ctx: AccessContext, workout_exercise_id: int) -> WorkoutExercise:
        """Load the exercise and its session by id and check the caller owns them."""
        workout_exercise = self._require(
            await self._workout_exercises.get_with_catalog(workout_exercise_id),
            "WorkoutExercise",
            workout_exercise_id,
        )
        workout = self._require(
            await self._workouts.get(workout_exercise.workout_session_id),
            "WorkoutSession",
            workout_exercise.workout_session_id,
        )
        ensure_owner_or_admin(ctx, workout.user_id, "WorkoutExercise", workout_exercise_id)
        return workout_exercise

    async def _load_set(self, ctx: AccessContext, set_id: int) -> tuple[SetModel, WorkoutExercise]:
        row = self._require(await self._sets.get(set_id), self._entity, set_id)
        parent = await self._load_parent(ctx, row.workout_exercise_id)
        return row, parent

    def _ensure_variant_matches(self, workout_exercise: WorkoutExercise, variant: SetVariant) -> None:
        declared = ExerciseType(workout_exercise.exercise.type)
        if variant.kind != self.set_type or declared != variant.kind:
            raise BusinessRuleError(
                f"Cannot record a {variant.kind.value.lower()} set on a "
                f"{declared.value.lower()} exercise",
                code="BR_SET_TYPE_MISMATCH",
                details={
                    "entity": "WorkoutExercise",
                    "id": workout_exercise.id,
                    "exercise_type": declared.value,
                    "set_type": variant.kind.value,
                },
            )

    async def _ensure_set_number_free(
        self, workout_exercise_id: int, set_number: int, exclude_id: int | None = None
    ) -> None:
        if await self._sets.set_number_taken(workout_exercise_id, set_number, exclude_id):
            raise ConflictError(
                f"Set number {set_number} already exists for exercise {workout_exercise_id}",
                code="CF_SET_NUMBER",
                details={
                    "entity": self._entity,
                    "workout_exercise_id": workout_exercise_id,
                    "set_number": set_number,
                },
            )

    @transactional
    async def create(
        self, ctx: AccessContext, workout_exercise_id: int, variant: SetVariant
    ) -> SetVariant:
        parent = await self._load_parent(ctx, workout_exercise_id)
        self._ensure_variant_matches(parent, variant)
        validate(variant)

        limit = self._settings.max_sets_per_exercise
        if await self._sets.count_by_exercise(parent.id) >= limit:
            raise BusinessRuleError(
                f"An exercise can hold at most {limit} sets",
                details={"entity": "WorkoutExercise", "id": parent.id, "limit": limit},
            )
        await self._ensure_set_number_free(parent.id, variant.fields.set_number)

        row = await self._sets.create(self._sets.new_row(parent.id, variant))
        logger.info(
            "set_created",
            set_type=self.set_type.value,
            set_id=row.id,
            workout_exercise_id=parent.id,
            set_number=row.set_number,
        )
        return to_variant(row)

    async def get(self, ctx: AccessContext, set_id: int) -> SetVariant:
        row, _ = await self._load_set(ctx, set_id)
        return to_variant(row)

    async def list_for_exercise(self, ctx: AccessContext, workout_exercise_id: int) -> list[SetVariant]:
        parent = await self._load_parent(ctx, workout_exercise_id)
        rows = await self._sets.list_by_exercise(parent.id)
        logger.debug(
            "sets_listed",
            set_type=self.set_type.value,
            workout_exercise_id=parent.id,
            count=len(rows),
        )
        return [to_variant(row) for row in rows]

    @transactional
    async def update(
        self,
        ctx: AccessContext,
        set_id: int,
        variant: SetVariant,
        expected_version: int | None = None,
    ) -> SetVariant:
        row, parent = await self._load_set(ctx, set_id)
        ensure_version(row, self._entity, expected_version)
        self._ensure_variant_matches(parent, variant)
        validate(variant)
        if variant.fields.set_number != row.set_number:
            await self._ensure_set_number_free(parent.id, variant.fields.set_number, exclude_id=row.id)

        apply_variant(row, variant)
        await flush_versioned(self._session, row, self._entity)
        logger.info(
            "set_updated",
            set_type=self.set_type.value,
            set_id=row.id,
            version=row.version,
        )
        return to_variant(row)

    @transactional
    async def delete(
        self, ctx: AccessContext, set_id: int, expected_version: int | None = None
    ) -> None:
        row, _ = await self._load_set(ctx, set_id)
        ensure_version(row, self._entity, expected_version)
        row.soft_delete(datetime.utcnow())
        await flush_versioned(self._session, row, self._entity)
        logger.info(
            "set_deleted",
            set_type=self.set_type.value,
            set_id=row.id,
            version=row.version,
        )
