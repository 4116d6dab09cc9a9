"""Request and response schemas for the three set variants.

The variant is chosen by the endpoint that receives the request, never by
which optional fields happen to be present.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from workoutplanner.domain.sets import SetVariant, payload_fields, summarize
from workoutplanner.models.enums import ExerciseType


class SetFieldsRequest(BaseModel):
    set_number: int = Field(..., ge=1, le=50)
    rest_time_seconds: Optional[int] = Field(None, ge=0, le=3600)
    notes: Optional[str] = Field(None, max_length=500)
    completed: bool = False

    def _common(self) -> dict:
        return dict(
            rest_time_seconds=self.rest_time_seconds,
            notes=self.notes,
            completed=self.completed,
        )


class CreateStrengthSetRequest(SetFieldsRequest):
    reps: int = Field(..., ge=1, le=1000)
    weight: Optional[Decimal] = Field(None, ge=0, le=1000, decimal_places=2)

    def to_variant(self) -> SetVariant:
        return SetVariant.strength(self.set_number, self.reps, self.weight, **self._common())


class CreateCardioSetRequest(SetFieldsRequest):
    duration_seconds: int = Field(..., ge=1, le=14400)
    distance: Optional[Decimal] = Field(None, ge=0, le=1000, decimal_places=2)
    distance_unit: Optional[str] = Field(None, max_length=10)

    def to_variant(self) -> SetVariant:
        return SetVariant.cardio(
            self.set_number,
            self.duration_seconds,
            self.distance,
            self.distance_unit,
            **self._common(),
        )


class CreateFlexibilitySetRequest(SetFieldsRequest):
    duration_seconds: int = Field(..., ge=1, le=14400)
    stretch_type: str = Field(..., min_length=2, max_length=50)
    intensity: int = Field(..., ge=1, le=10)

    def to_variant(self) -> SetVariant:
        return SetVariant.flexibility(
            self.set_number,
            self.duration_seconds,
            self.stretch_type,
            self.intensity,
            **self._common(),
        )


class UpdateStrengthSetRequest(CreateStrengthSetRequest):
    version: int = Field(..., ge=0)


class UpdateCardioSetRequest(CreateCardioSetRequest):
    version: int = Field(..., ge=0)


class UpdateFlexibilitySetRequest(CreateFlexibilitySetRequest):
    version: int = Field(..., ge=0)


class SetResponse(BaseModel):
    id: int
    workout_exercise_id: int
    set_type: ExerciseType
    set_number: int
    rest_time_seconds: Optional[int] = None
    notes: Optional[str] = None
    completed: bool = False
    version: int
    summary: str

    reps: Optional[int] = None
    weight: Optional[Decimal] = None
    duration_seconds: Optional[int] = None
    distance: Optional[Decimal] = None
    distance_unit: Optional[str] = None
    stretch_type: Optional[str] = None
    intensity: Optional[int] = None

    @classmethod
    def from_variant(cls, variant: SetVariant) -> "SetResponse":
        return cls(
            id=variant.id,
            workout_exercise_id=variant.workout_exercise_id,
            set_type=variant.kind,
            set_number=variant.fields.set_number,
            rest_time_seconds=variant.fields.rest_time_seconds,
            notes=variant.fields.notes,
            completed=variant.fields.completed,
            version=variant.version,
            summary=summarize(variant),
            **payload_fields(variant),
        )
