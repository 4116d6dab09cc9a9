from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from workoutplanner.core.exceptions import NotFoundError

T = TypeVar("T")


class BaseService:
    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _require(entity: T | None, entity_name: str, id: int) -> T:
        if entity is None:
            raise NotFoundError(
                entity_name,
                f"{entity_name} {id} not found",
                {"entity": entity_name, "id": id},
            )
        return entity
