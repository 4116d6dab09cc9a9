"""Optimistic concurrency for versioned rows.

Every versioned model maps ``version`` as its SQLAlchemy ``version_id_col``
with the generator disabled. The service bumps the counter by one right
before flushing, and SQLAlchemy adds ``WHERE version = <loaded>`` to the
UPDATE. A concurrent writer therefore either fails the explicit check
below or matches zero rows at flush time; both surface as
``OptimisticLockConflictError`` and nothing is written.
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from workoutplanner.core.exceptions import OptimisticLockConflictError
from workoutplanner.core.logging import get_logger

logger = get_logger(__name__)


def ensure_version(entity, entity_name: str, expected_version: int | None) -> None:
    """Reject a write whose caller saw an older (or newer) version."""
    if expected_version is None:
        return
    if entity.version != expected_version:
        logger.info(
            "optimistic_lock_conflict",
            entity=entity_name,
            entity_id=entity.id,
            expected_version=expected_version,
            actual_version=entity.version,
        )
        raise OptimisticLockConflictError(entity_name, entity.id, expected_version, entity.version)


def bump_version(*entities) -> None:
    for entity in entities:
        entity.version = (entity.version or 0) + 1


async def flush_versioned(session: AsyncSession, entity, entity_name: str) -> None:
    """Bump ``entity`` and flush, translating a stale UPDATE into a conflict.

    A failed flush rolls the session back and expires ``entity``, so its
    identity is read up front and only those values are used afterwards.
    """
    entity_id = entity.id
    loaded_version = entity.version
    bump_version(entity)
    try:
        await session.flush()
    except StaleDataError as exc:
        logger.info(
            "optimistic_lock_conflict",
            entity=entity_name,
            entity_id=entity_id,
            expected_version=loaded_version,
            reason="stale_row",
        )
        raise OptimisticLockConflictError(entity_name, entity_id, loaded_version, None) from exc
