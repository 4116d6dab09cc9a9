"""Pydantic schemas for workout sessions and exercises within them."""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from workoutplanner.models.enums import ExerciseType, WorkoutAction, WorkoutStatus
from workoutplanner.schemas.sets import SetResponse


# ============== Requests ==============

class CreateWorkoutRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    notes: Optional[str] = Field(None, max_length=1000)


class UpdateWorkoutRequest(BaseModel):
    """Partial update. Status is changed only through workout actions.

    Timestamps are stored as naive UTC; offset-aware input is converted.
    """

    version: int = Field(..., ge=0)
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    notes: Optional[str] = Field(None, max_length=1000)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    actual_duration_minutes: Optional[int] = Field(None, ge=1, le=1440)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("name cannot be null")
        return v

    @field_validator("started_at", "completed_at")
    @classmethod
    def to_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @model_validator(mode="after")
    def require_one_field(self) -> "UpdateWorkoutRequest":
        if not self.changes():
            raise ValueError("At least one field must be provided for update")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"version"})


class WorkoutActionRequest(BaseModel):
    action: WorkoutAction
    version: Optional[int] = Field(None, ge=0)


class AddWorkoutExerciseRequest(BaseModel):
    exercise_id: int = Field(..., ge=1)
    order_in_workout: int = Field(..., ge=1, le=100)
    notes: Optional[str] = Field(None, max_length=1000)


class UpdateWorkoutExerciseRequest(BaseModel):
    version: int = Field(..., ge=0)
    order_in_workout: Optional[int] = Field(None, ge=1, le=100)
    notes: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def require_one_field(self) -> "UpdateWorkoutExerciseRequest":
        if not self.changes():
            raise ValueError("At least one field must be provided for update")
        return self

    def changes(self) -> dict:
        """Provided fields; a null position means "keep", notes may be cleared."""
        changes = self.model_dump(exclude_unset=True, exclude={"version"})
        if changes.get("order_in_workout", 0) is None:
            del changes["order_in_workout"]
        return changes


# ============== Responses ==============

class WorkoutResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    status: WorkoutStatus
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    actual_duration_minutes: Optional[int] = None
    notes: Optional[str] = None
    version: int
    created_at: datetime
    updated_at: datetime


class WorkoutExerciseResponse(BaseModel):
    id: int
    workout_session_id: int
    exercise_id: int
    exercise_name: str
    exercise_type: ExerciseType
    order_in_workout: int
    notes: Optional[str] = None
    version: int
    sets: list[SetResponse] = Field(default_factory=list)

    @classmethod
    def from_model(cls, workout_exercise, sets: list[SetResponse] | None = None) -> "WorkoutExerciseResponse":
        return cls(
            id=workout_exercise.id,
            workout_session_id=workout_exercise.workout_session_id,
            exercise_id=workout_exercise.exercise_id,
            exercise_name=workout_exercise.exercise.name,
            exercise_type=workout_exercise.exercise.type,
            order_in_workout=workout_exercise.order_in_workout,
            notes=workout_exercise.notes,
            version=workout_exercise.version,
            sets=sets or [],
        )


class WorkoutDetailResponse(WorkoutResponse):
    exercises: list[WorkoutExerciseResponse] = Field(default_factory=list)

    @classmethod
    def from_loaded(cls, loaded) -> "WorkoutDetailResponse":
        base = WorkoutResponse.model_validate(loaded.workout)
        exercises = [
            WorkoutExerciseResponse.from_model(
                item.workout_exercise,
                [SetResponse.from_variant(v) for v in item.sets],
            )
            for item in loaded.exercises
        ]
        return cls(**base.model_dump(), exercises=exercises)


class WorkoutListResponse(BaseModel):
    items: list[WorkoutResponse]
    next_cursor: Optional[str] = None
    has_more: bool = False
