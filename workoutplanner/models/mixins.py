"""Column mixins shared by the aggregate tables."""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime


class TimestampMixin:
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class SoftDeleteMixin:
    """Rows are marked deleted instead of being removed.

    Cascades stamp the whole subtree with the same ``deleted_at`` so a
    restore can tell which children went with the parent.
    """

    deleted = Column(Boolean, default=False, nullable=False, index=True)
    deleted_at = Column(DateTime, nullable=True)

    def soft_delete(self, when: datetime | None = None) -> None:
        self.deleted = True
        self.deleted_at = when or datetime.utcnow()

    def restore(self) -> None:
        self.deleted = False
        self.deleted_at = None

    @property
    def is_active(self) -> bool:
        return not self.deleted
