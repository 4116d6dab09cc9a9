"""Exercise catalog entry referenced by exercises in a session."""
from sqlalchemy import Column, Enum, Integer, String, Text

from workoutplanner.db.database import Base
from workoutplanner.models.enums import DifficultyLevel, ExerciseType, TargetMuscleGroup
from workoutplanner.models.mixins import SoftDeleteMixin, TimestampMixin


class Exercise(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    type = Column(Enum(ExerciseType, name="exercise_type"), nullable=False, index=True)
    target_muscle_group = Column(
        Enum(TargetMuscleGroup, name="target_muscle_group"), nullable=False
    )
    difficulty_level = Column(
        Enum(DifficultyLevel, name="difficulty_level"),
        nullable=False,
        default=DifficultyLevel.BEGINNER,
    )
    image_url = Column(String(500), nullable=True)

    version = Column(Integer, nullable=False, default=0)

    __mapper_args__ = {"version_id_col": version, "version_id_generator": False}

    def __repr__(self):
        return f"<Exercise(id={self.id}, name={self.name!r}, type={self.type})>"
