from sqlalchemy import func, select

from workoutplanner.domain.sets import SetFields, SetVariant, payload_fields
from workoutplanner.models.enums import ExerciseType
from workoutplanner.models.sets import SET_MODELS, SetModel
from workoutplanner.repositories.base import SoftDeleteRepository


def to_variant(row: SetModel) -> SetVariant:
    """Build the tagged variant for a stored set row."""
    common = dict(
        rest_time_seconds=row.rest_time_seconds,
        notes=row.notes,
        completed=bool(row.completed),
    )
    match row.set_type:
        case ExerciseType.STRENGTH:
            variant = SetVariant.strength(row.set_number, row.reps, row.weight, **common)
        case ExerciseType.CARDIO:
            variant = SetVariant.cardio(
                row.set_number, row.duration_seconds, row.distance, row.distance_unit, **common
            )
        case ExerciseType.FLEXIBILITY:
            variant = SetVariant.flexibility(
                row.set_number, row.duration_seconds, row.stretch_type, row.intensity, **common
            )
    return variant.with_identity(row.id, row.workout_exercise_id, row.version)


def apply_variant(row: SetModel, variant: SetVariant) -> SetModel:
    """Copy common and payload fields of ``variant`` onto ``row``."""
    fields: SetFields = variant.fields
    row.set_number = fields.set_number
    row.rest_time_seconds = fields.rest_time_seconds
    row.notes = fields.notes
    row.completed = fields.completed
    for name, value in payload_fields(variant).items():
        setattr(row, name, value)
    return row


class SetRepository(SoftDeleteRepository[SetModel]):
    """Repository for one set variant; the variant picks the table."""

    def __init__(self, session, set_type: ExerciseType):
        super().__init__(session)
        self.set_type = ExerciseType(set_type)
        self.model = SET_MODELS[self.set_type]

    def new_row(self, workout_exercise_id: int, variant: SetVariant) -> SetModel:
        row = self.model(workout_exercise_id=workout_exercise_id, version=0)
        return apply_variant(row, variant)

    async def list_by_exercise(self, workout_exercise_id: int) -> list[SetModel]:
        result = await self._session.execute(
            self._select()
            .where(self.model.workout_exercise_id == workout_exercise_id)
            .order_by(self.model.set_number, self.model.id)
        )
        return list(result.scalars().all())

    async def list_by_exercises(self, workout_exercise_ids: list[int]) -> list[SetModel]:
        """All active sets of the given exercises in a single IN query."""
        if not workout_exercise_ids:
            return []
        result = await self._session.execute(
            self._select()
            .where(self.model.workout_exercise_id.in_(workout_exercise_ids))
            .order_by(self.model.workout_exercise_id, self.model.set_number, self.model.id)
        )
        return list(result.scalars().all())

    async def count_by_exercise(self, workout_exercise_id: int) -> int:
        result = await self._session.execute(
            select(func.count())
            .select_from(self.model)
            .where(
                self.model.workout_exercise_id == workout_exercise_id,
                self.model.deleted.is_(False),
            )
        )
        return result.scalar_one()

    async def set_number_taken(
        self, workout_exercise_id: int, set_number: int, exclude_id: int | None = None
    ) -> bool:
        query = select(self.model.id).where(
            self.model.workout_exercise_id == workout_exercise_id,
            self.model.set_number == set_number,
            self.model.deleted.is_(False),
        )
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        result = await self._session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None
