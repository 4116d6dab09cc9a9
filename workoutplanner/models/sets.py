"""One table per set variant.

A set row never points back to anything but its parent exercise id; the
variant is fixed by the table it lives in.
"""
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import declared_attr

from workoutplanner.db.database import Base
from workoutplanner.models.enums import ExerciseType
from workoutplanner.models.mixins import SoftDeleteMixin, TimestampMixin


class SetColumnsMixin(SoftDeleteMixin, TimestampMixin):
    """Fields every set variant carries."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    set_number = Column(Integer, nullable=False)
    rest_time_seconds = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    completed = Column(Boolean, nullable=False, default=False)

    @declared_attr
    def workout_exercise_id(cls):
        return Column(
            Integer,
            ForeignKey("workout_exercises.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )

    @classmethod
    def _set_table_args(cls, table: str, *extra):
        return (
            CheckConstraint(
                "set_number >= 1 AND set_number <= 50", name=f"ck_{table}_set_number_range"
            ),
            Index(
                f"uq_{table}_active_number",
                "workout_exercise_id",
                "set_number",
                unique=True,
                postgresql_where=text("NOT deleted"),
                sqlite_where=text("NOT deleted"),
            ),
            *extra,
        )


class StrengthSet(SetColumnsMixin, Base):
    __tablename__ = "strength_sets"
    set_type = ExerciseType.STRENGTH

    reps = Column(Integer, nullable=False)
    weight = Column(Numeric(6, 2), nullable=True)

    version = Column(Integer, nullable=False, default=0)

    __table_args__ = SetColumnsMixin._set_table_args(
        "strength_sets",
        CheckConstraint("reps >= 1", name="ck_strength_sets_reps_positive"),
    )
    __mapper_args__ = {"version_id_col": version, "version_id_generator": False}


class CardioSet(SetColumnsMixin, Base):
    __tablename__ = "cardio_sets"
    set_type = ExerciseType.CARDIO

    duration_seconds = Column(Integer, nullable=False)
    distance = Column(Numeric(8, 2), nullable=True)
    distance_unit = Column(String(10), nullable=True)

    version = Column(Integer, nullable=False, default=0)

    __table_args__ = SetColumnsMixin._set_table_args(
        "cardio_sets",
        CheckConstraint("duration_seconds >= 1", name="ck_cardio_sets_duration_positive"),
    )
    __mapper_args__ = {"version_id_col": version, "version_id_generator": False}


class FlexibilitySet(SetColumnsMixin, Base):
    __tablename__ = "flexibility_sets"
    set_type = ExerciseType.FLEXIBILITY

    duration_seconds = Column(Integer, nullable=False)
    stretch_type = Column(String(50), nullable=False)
    intensity = Column(Integer, nullable=False)

    version = Column(Integer, nullable=False, default=0)

    __table_args__ = SetColumnsMixin._set_table_args(
        "flexibility_sets",
        CheckConstraint("duration_seconds >= 1", name="ck_flexibility_sets_duration_positive"),
        CheckConstraint(
            "intensity >= 1 AND intensity <= 10", name="ck_flexibility_sets_intensity_range"
        ),
    )
    __mapper_args__ = {"version_id_col": version, "version_id_generator": False}


SetModel = StrengthSet | CardioSet | FlexibilitySet

SET_MODELS: dict[ExerciseType, type[SetModel]] = {
    ExerciseType.STRENGTH: StrengthSet,
    ExerciseType.CARDIO: CardioSet,
    ExerciseType.FLEXIBILITY: FlexibilitySet,
}
