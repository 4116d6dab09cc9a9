"""First sign-in sync of users from identity token claims."""
from workoutplanner.core.logging import get_logger
from workoutplanner.core.transactions import transactional
from workoutplanner.models.enums import UserRole
from workoutplanner.models.user import User
from workoutplanner.repositories.user_repository import UserRepository
from workoutplanner.services.base import BaseService

logger = get_logger(__name__)


class UserService(BaseService):
    def __init__(self, session):
        super().__init__(session)
        self._users = UserRepository(session)

    @transactional
    async def sync_user(self, claims: dict) -> User:
        """Return the user for ``claims["sub"]``, creating it on first sight.

        Profile fields and role of an existing user are left untouched.
        """
        external_id = str(claims["sub"])
        user = await self._users.get_by_external_id(external_id)
        if user is not None:
            return user

        username = claims.get("username") or claims.get("nickname") or external_id
        if await self._users.get_by_username(username) is not None:
            username = f"{username}-{external_id[-8:]}"

        role = claims.get("role", UserRole.USER.value)
        user = User(
            external_id=external_id,
            username=username[:50],
            email=claims.get("email"),
            first_name=claims.get("given_name"),
            last_name=claims.get("family_name"),
            role=UserRole(role) if role in UserRole._value2member_map_ else UserRole.USER,
            version=0,
        )
        await self._users.create(user)
        logger.info("user_synced", user_id=user.id, external_id=external_id, role=user.role.value)
        return user
