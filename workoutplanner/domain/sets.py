"""Set variants as a tagged sum type.

A set is one of three shapes selected by the ``kind`` tag, which always
equals the declared type of the catalog exercise the set belongs to.
Validation and summaries dispatch on the tag, so every operation handles
all three variants in one place.
"""
from dataclasses import asdict, dataclass, field, replace
from decimal import ROUND_HALF_UP, Decimal

from workoutplanner.core.exceptions import ValidationError
from workoutplanner.models.enums import ExerciseType

SET_NUMBER_MIN, SET_NUMBER_MAX = 1, 50
REPS_MIN, REPS_MAX = 1, 1000
WEIGHT_MAX = Decimal("1000")
DURATION_MIN, DURATION_MAX = 1, 14400
DISTANCE_MAX = Decimal("1000")
DISTANCE_UNIT_MAX_LENGTH = 10
REST_MAX = 3600
NOTES_MAX_LENGTH = 500
STRETCH_TYPE_MIN_LENGTH, STRETCH_TYPE_MAX_LENGTH = 2, 50
INTENSITY_MIN, INTENSITY_MAX = 1, 10

_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class SetFields:
    set_number: int
    rest_time_seconds: int | None = None
    notes: str | None = None
    completed: bool = False


@dataclass(frozen=True)
class StrengthPayload:
    reps: int
    weight: Decimal | None = None


@dataclass(frozen=True)
class CardioPayload:
    duration_seconds: int
    distance: Decimal | None = None
    distance_unit: str | None = None


@dataclass(frozen=True)
class FlexibilityPayload:
    duration_seconds: int
    stretch_type: str
    intensity: int


SetPayload = StrengthPayload | CardioPayload | FlexibilityPayload

_PAYLOAD_FOR_KIND: dict[ExerciseType, type] = {
    ExerciseType.STRENGTH: StrengthPayload,
    ExerciseType.CARDIO: CardioPayload,
    ExerciseType.FLEXIBILITY: FlexibilityPayload,
}


@dataclass(frozen=True)
class SetVariant:
    """One recorded set: common fields, a variant payload and its tag."""

    kind: ExerciseType
    fields: SetFields
    payload: SetPayload
    id: int | None = None
    workout_exercise_id: int | None = None
    version: int | None = field(default=None, compare=False)

    @classmethod
    def strength(cls, set_number: int, reps: int, weight: Decimal | None = None, **common):
        return cls(ExerciseType.STRENGTH, SetFields(set_number, **common), StrengthPayload(reps, weight))

    @classmethod
    def cardio(
        cls,
        set_number: int,
        duration_seconds: int,
        distance: Decimal | None = None,
        distance_unit: str | None = None,
        **common,
    ):
        return cls(
            ExerciseType.CARDIO,
            SetFields(set_number, **common),
            CardioPayload(duration_seconds, distance, distance_unit),
        )

    @classmethod
    def flexibility(
        cls, set_number: int, duration_seconds: int, stretch_type: str, intensity: int, **common
    ):
        return cls(
            ExerciseType.FLEXIBILITY,
            SetFields(set_number, **common),
            FlexibilityPayload(duration_seconds, stretch_type, intensity),
        )

    def with_identity(self, id: int, workout_exercise_id: int, version: int) -> "SetVariant":
        return replace(self, id=id, workout_exercise_id=workout_exercise_id, version=version)


def _check_range(field_name: str, value, low, high) -> None:
    if value is None:
        return
    if low is not None and value < low:
        raise ValidationError(field_name, f"must be at least {low}", {"field": field_name, "value": str(value)})
    if high is not None and value > high:
        raise ValidationError(field_name, f"must be at most {high}", {"field": field_name, "value": str(value)})


def _check_length(field_name: str, value: str | None, low: int, high: int) -> None:
    if value is None:
        return
    length = len(value.strip())
    if length < low or length > high:
        raise ValidationError(
            field_name, f"length must be between {low} and {high}", {"field": field_name}
        )


def _require(field_name: str, value) -> None:
    if value is None:
        raise ValidationError(field_name, "is required")


def validate(variant: SetVariant) -> SetVariant:
    """Check common and variant-specific constraints. Returns the variant unchanged."""
    expected = _PAYLOAD_FOR_KIND.get(variant.kind)
    if expected is None or type(variant.payload) is not expected:
        raise ValidationError(
            "set_type",
            f"payload does not match set type {variant.kind}",
            {"field": "set_type", "kind": str(variant.kind)},
        )

    common = variant.fields
    _require("set_number", common.set_number)
    _check_range("set_number", common.set_number, SET_NUMBER_MIN, SET_NUMBER_MAX)
    _check_range("rest_time_seconds", common.rest_time_seconds, 0, REST_MAX)
    _check_length("notes", common.notes, 0, NOTES_MAX_LENGTH)

    payload = variant.payload
    match variant.kind:
        case ExerciseType.STRENGTH:
            _require("reps", payload.reps)
            _check_range("reps", payload.reps, REPS_MIN, REPS_MAX)
            _check_range("weight", payload.weight, Decimal(0), WEIGHT_MAX)
        case ExerciseType.CARDIO:
            _require("duration_seconds", payload.duration_seconds)
            _check_range("duration_seconds", payload.duration_seconds, DURATION_MIN, DURATION_MAX)
            _check_range("distance", payload.distance, Decimal(0), DISTANCE_MAX)
            _check_length("distance_unit", payload.distance_unit, 0, DISTANCE_UNIT_MAX_LENGTH)
        case ExerciseType.FLEXIBILITY:
            _require("duration_seconds", payload.duration_seconds)
            _check_range("duration_seconds", payload.duration_seconds, DURATION_MIN, DURATION_MAX)
            _require("stretch_type", payload.stretch_type)
            _check_length(
                "stretch_type", payload.stretch_type, STRETCH_TYPE_MIN_LENGTH, STRETCH_TYPE_MAX_LENGTH
            )
            _require("intensity", payload.intensity)
            _check_range("intensity", payload.intensity, INTENSITY_MIN, INTENSITY_MAX)
    return variant


def _two_places(value: Decimal | None) -> str:
    return str(Decimal(value or 0).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def summarize(variant: SetVariant) -> str:
    """Human readable one-liner, e.g. ``10 reps @ 100.00 kg``."""
    payload = variant.payload
    match variant.kind:
        case ExerciseType.STRENGTH:
            return f"{payload.reps} reps @ {_two_places(payload.weight)} kg"
        case ExerciseType.CARDIO:
            if payload.distance is None:
                return f"{payload.duration_seconds} seconds, no distance"
            unit = payload.distance_unit or "units"
            return f"{payload.duration_seconds} seconds, {_two_places(payload.distance)} {unit}"
        case ExerciseType.FLEXIBILITY:
            return (
                f"{payload.duration_seconds} seconds of {payload.stretch_type} "
                f"(intensity: {payload.intensity}/10)"
            )
    raise ValidationError("set_type", f"unknown set type {variant.kind}")


def payload_fields(variant: SetVariant) -> dict:
    """Variant-specific column values keyed by column name."""
    return asdict(variant.payload)
