from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workoutplanner.models.user import User
from workoutplanner.repositories.base import Repository


class UserRepository(Repository[User, int]):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, id: int) -> User | None:
        return await self._session.get(User, id)

    async def get_by_external_id(self, external_id: str) -> User | None:
        result = await self._session.execute(
            select(User).where(User.external_id == external_id)
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        result = await self._session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def create(self, entity: User) -> User:
        if entity.version is None:
            entity.version = 0
        self._session.add(entity)
        await self._session.flush()
        return entity
