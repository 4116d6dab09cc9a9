from workoutplanner.core.logging import get_logger
from workoutplanner.core.transactions import transactional
from workoutplanner.models.exercise import Exercise
from workoutplanner.repositories.exercise_repository import ExerciseRepository
from workoutplanner.schemas.exercise import CreateExerciseRequest
from workoutplanner.schemas.pagination import PaginatedResult, PaginationParams
from workoutplanner.security.access import AccessContext, ensure_admin
from workoutplanner.services.base import BaseService

logger = get_logger(__name__)


class ExerciseCatalogService(BaseService):
    """Catalog entries that sessions reference for their declared set type."""

    def __init__(self, session):
        super().__init__(session)
        self._exercises = ExerciseRepository(session)

    async def get(self, exercise_id: int) -> Exercise:
        return self._require(await self._exercises.get(exercise_id), "Exercise", exercise_id)

    async def list(
        self,
        pagination: PaginationParams,
        type=None,
        target_muscle_group=None,
        search: str | None = None,
    ) -> PaginatedResult[Exercise]:
        filter = {}
        if type is not None:
            filter["type"] = type
        if target_muscle_group is not None:
            filter["target_muscle_group"] = target_muscle_group
        if search:
            filter["search"] = search.strip()
        return await self._exercises.list(filter, pagination)

    @transactional
    async def create(self, ctx: AccessContext, request: CreateExerciseRequest) -> Exercise:
        ensure_admin(ctx, "create exercises")
        exercise = Exercise(**request.model_dump(), version=0)
        await self._exercises.create(exercise)
        logger.info(
            "exercise_created",
            exercise_id=exercise.id,
            type=exercise.type.value,
            created_by=ctx.user_id,
        )
        return exercise
