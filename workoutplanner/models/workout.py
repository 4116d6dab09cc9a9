"""Workout session and the exercises performed within it."""
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship

from workoutplanner.db.database import Base
from workoutplanner.models.enums import WorkoutStatus
from workoutplanner.models.mixins import SoftDeleteMixin, TimestampMixin


class WorkoutSession(SoftDeleteMixin, TimestampMixin, Base):
    """Aggregate root: one planned or performed workout owned by a user.

    Status only changes through the transition table in
    ``services.status_transitions``. ``completed_at`` is set exactly when
    the status is COMPLETED and ``started_at`` once the session has left
    PLANNED.
    """
    __tablename__ = "workout_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        Enum(WorkoutStatus, name="workout_status"),
        nullable=False,
        default=WorkoutStatus.PLANNED,
        index=True,
    )
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    actual_duration_minutes = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    version = Column(Integer, nullable=False, default=0)

    # Children hold the parent id only; this view is read-only and never lazy loads.
    active_exercises = relationship(
        "WorkoutExercise",
        primaryjoin="and_(WorkoutSession.id == WorkoutExercise.workout_session_id, "
        "WorkoutExercise.deleted.is_(False))",
        order_by="WorkoutExercise.order_in_workout",
        viewonly=True,
        lazy="raise",
    )

    __table_args__ = (
        CheckConstraint(
            "completed_at IS NULL OR status = 'COMPLETED'",
            name="ck_workout_sessions_completed_at_status",
        ),
        CheckConstraint(
            "actual_duration_minutes IS NULL OR actual_duration_minutes >= 0",
            name="ck_workout_sessions_duration_non_negative",
        ),
        Index("ix_workout_sessions_user_created", "user_id", "created_at"),
    )

    __mapper_args__ = {"version_id_col": version, "version_id_generator": False}

    def __repr__(self):
        return f"<WorkoutSession(id={self.id}, user_id={self.user_id}, status={self.status})>"


class WorkoutExercise(SoftDeleteMixin, TimestampMixin, Base):
    """A catalog exercise placed at a position inside a session."""
    __tablename__ = "workout_exercises"

    id = Column(Integer, primary_key=True, autoincrement=True)
    workout_session_id = Column(
        Integer, ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id = Column(Integer, ForeignKey("exercises.id"), nullable=False, index=True)
    order_in_workout = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    version = Column(Integer, nullable=False, default=0)

    exercise = relationship("Exercise", lazy="raise")

    __table_args__ = (
        CheckConstraint(
            "order_in_workout >= 1 AND order_in_workout <= 100",
            name="ck_workout_exercises_order_range",
        ),
        Index(
            "uq_workout_exercises_active_order",
            "workout_session_id",
            "order_in_workout",
            unique=True,
            postgresql_where=text("NOT deleted"),
            sqlite_where=text("NOT deleted"),
        ),
    )

    __mapper_args__ = {"version_id_col": version, "version_id_generator": False}

    def __repr__(self):
        return (
            f"<WorkoutExercise(id={self.id}, session={self.workout_session_id}, "
            f"order={self.order_in_workout})>"
        )
