"""Caller identity passed explicitly into every service operation."""
from dataclasses import dataclass

from workoutplanner.core.exceptions import AuthorizationError
from workoutplanner.models.enums import UserRole


@dataclass(frozen=True)
class AccessContext:
    user_id: int
    is_admin: bool = False

    @classmethod
    def for_user(cls, user) -> "AccessContext":
        return cls(user_id=user.id, is_admin=user.role == UserRole.ADMIN)

    def can_access(self, owner_id: int) -> bool:
        return self.is_admin or self.user_id == owner_id


def ensure_owner_or_admin(ctx: AccessContext, owner_id: int, resource: str, resource_id: int) -> None:
    if not ctx.can_access(owner_id):
        raise AuthorizationError(
            f"Not allowed to access {resource} {resource_id}",
            details={"resource": resource, "id": resource_id, "user_id": ctx.user_id},
        )


def ensure_admin(ctx: AccessContext, action: str) -> None:
    if not ctx.is_admin:
        raise AuthorizationError(
            f"Administrator role required to {action}",
            code="AUTH_007",
            details={"user_id": ctx.user_id},
        )
