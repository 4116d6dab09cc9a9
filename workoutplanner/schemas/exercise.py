from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from workoutplanner.models.enums import DifficultyLevel, ExerciseType, TargetMuscleGroup


class CreateExerciseRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    type: ExerciseType
    target_muscle_group: TargetMuscleGroup
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER
    image_url: Optional[str] = Field(None, max_length=500)


class ExerciseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    type: ExerciseType
    target_muscle_group: TargetMuscleGroup
    difficulty_level: DifficultyLevel
    image_url: Optional[str] = None
    version: int
    created_at: datetime


class ExerciseListResponse(BaseModel):
    items: list[ExerciseResponse]
    next_cursor: Optional[str] = None
    has_more: bool = False
