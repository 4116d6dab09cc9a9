from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")
ID = TypeVar("ID")


class Repository(ABC, Generic[T, ID]):
    """Persistence port for one entity type."""

    @abstractmethod
    async def get(self, id: ID) -> T | None:
        ...

    @abstractmethod
    async def create(self, entity: T) -> T:
        ...


class SoftDeleteRepository(Repository[T, int]):
    """Shared plumbing for tables that use :class:`SoftDeleteMixin`.

    Reads hide soft-deleted rows unless ``include_deleted`` is passed.
    """

    model: type[T]

    def __init__(self, session: AsyncSession):
        self._session = session

    def _select(self, include_deleted: bool = False) -> Select:
        # Cascades write through bulk UPDATEs, so reloaded rows replace identity map state.
        query = select(self.model).execution_options(populate_existing=True)
        if not include_deleted:
            query = query.where(self.model.deleted.is_(False))
        return query

    async def get(self, id: int, include_deleted: bool = False) -> T | None:
        result = await self._session.execute(
            self._select(include_deleted).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def create(self, entity: T) -> T:
        if entity.version is None:
            entity.version = 0
        self._session.add(entity)
        await self._session.flush()
        return entity
