"""User model: the owner referenced by workout sessions."""
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, Integer, String

from workoutplanner.db.database import Base
from workoutplanner.models.enums import UserRole


class User(Base):
    """A person known to the identity provider.

    Rows are created by the first authenticated sign-in sync and keyed by
    the provider's subject (``external_id``).
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(String(100), unique=True, nullable=False, index=True)
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.USER)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    version = Column(Integer, nullable=False, default=0)

    __mapper_args__ = {"version_id_col": version, "version_id_generator": False}

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username!r}, role={self.role})>"
