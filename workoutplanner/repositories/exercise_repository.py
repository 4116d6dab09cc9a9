from workoutplanner.models.exercise import Exercise
from workoutplanner.repositories.base import SoftDeleteRepository
from workoutplanner.schemas.pagination import PaginatedResult, PaginationParams
from workoutplanner.core.pagination import decode_cursor


class ExerciseRepository(SoftDeleteRepository[Exercise]):
    """Catalog of exercises available to every user."""

    model = Exercise

    async def list(self, filter: dict, pagination: PaginationParams) -> PaginatedResult[Exercise]:
        query = self._select()

        if "type" in filter:
            query = query.where(Exercise.type == filter["type"])

        if "target_muscle_group" in filter:
            query = query.where(Exercise.target_muscle_group == filter["target_muscle_group"])

        if "difficulty_level" in filter:
            query = query.where(Exercise.difficulty_level == filter["difficulty_level"])

        if "search" in filter:
            query = query.where(Exercise.name.ilike(f"%{filter['search']}%"))

        query = query.order_by(Exercise.id)

        if pagination.cursor:
            last_id = decode_cursor(pagination.cursor, "id")
            query = query.where(Exercise.id > last_id)

        result = await self._session.execute(query.limit(pagination.fetch_size))
        return PaginatedResult.from_rows(list(result.scalars().all()), pagination)
