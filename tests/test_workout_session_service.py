"""Integration tests for WorkoutSessionService against a temporary database."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select

from workoutplanner.core.exceptions import (
    AuthorizationError,
    BusinessRuleError,
    ConflictError,
    IllegalStateTransitionError,
    NotFoundError,
    OptimisticLockConflictError,
    ValidationError,
)
from workoutplanner.domain.sets import SetVariant
from workoutplanner.models import (
    CardioSet,
    ExerciseType,
    StrengthSet,
    WorkoutAction,
    WorkoutExercise,
    WorkoutSession,
    WorkoutStatus,
)
from workoutplanner.schemas.pagination import PaginationParams
from workoutplanner.schemas.workout import (
    AddWorkoutExerciseRequest,
    CreateWorkoutRequest,
    UpdateWorkoutExerciseRequest,
    UpdateWorkoutRequest,
)
from workoutplanner.services.set_service import SetService
from workoutplanner.services.workout_session_service import WorkoutSessionService

pytestmark = pytest.mark.integration


@pytest.fixture
def service(db_session):
    return WorkoutSessionService(db_session)


async def create_workout(service, ctx, name="Leg day"):
    return await service.create(ctx, CreateWorkoutRequest(name=name))


async def add_exercise(service, ctx, workout_id, catalog_entry, order=1):
    return await service.add_exercise(
        ctx,
        workout_id,
        AddWorkoutExerciseRequest(exercise_id=catalog_entry.id, order_in_workout=order),
    )


class TestCreateAndGet:
    async def test_create_starts_planned_at_version_zero(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)

        assert workout.id is not None
        assert workout.user_id == owner_ctx.user_id
        assert workout.status == WorkoutStatus.PLANNED
        assert workout.version == 0
        assert workout.started_at is None

    async def test_get_missing_session(self, service, owner_ctx):
        with pytest.raises(NotFoundError) as exc_info:
            await service.get(owner_ctx, 9999)
        assert exc_info.value.code == "NF_WORKOUTSESSION_001"
        assert exc_info.value.details == {"entity": "WorkoutSession", "id": 9999}

    async def test_other_user_is_forbidden(self, service, owner_ctx, other_ctx):
        workout = await create_workout(service, owner_ctx)
        with pytest.raises(AuthorizationError):
            await service.get(other_ctx, workout.id)
        with pytest.raises(AuthorizationError):
            await service.perform_action(other_ctx, workout.id, WorkoutAction.START)

    async def test_admin_may_act_on_any_session(self, service, owner_ctx, admin_ctx):
        workout = await create_workout(service, owner_ctx)
        updated = await service.perform_action(admin_ctx, workout.id, WorkoutAction.START)
        assert updated.status == WorkoutStatus.IN_PROGRESS


class TestListByOwner:
    async def test_pages_newest_first(self, service, owner_ctx, other_ctx):
        ids = [(await create_workout(service, owner_ctx, f"Session {i}")).id for i in range(5)]
        await create_workout(service, other_ctx, "Not mine")

        first = await service.list_by_owner(owner_ctx, PaginationParams(limit=3))
        assert [w.id for w in first.items] == ids[::-1][:3]
        assert first.has_more is True

        second = await service.list_by_owner(
            owner_ctx, PaginationParams(limit=3, cursor=first.next_cursor)
        )
        assert [w.id for w in second.items] == ids[::-1][3:]
        assert second.has_more is False
        assert second.next_cursor is None

    async def test_listing_another_user_requires_admin(self, service, owner_ctx, other_ctx, admin_ctx):
        await create_workout(service, owner_ctx)
        with pytest.raises(AuthorizationError):
            await service.list_by_owner(other_ctx, PaginationParams(), owner_id=owner_ctx.user_id)

        page = await service.list_by_owner(admin_ctx, PaginationParams(), owner_id=owner_ctx.user_id)
        assert len(page.items) == 1

    async def test_status_filter(self, service, owner_ctx):
        planned = await create_workout(service, owner_ctx, "Planned")
        started = await create_workout(service, owner_ctx, "Started")
        await service.perform_action(owner_ctx, started.id, WorkoutAction.START)

        page = await service.list_by_owner(
            owner_ctx, PaginationParams(), status=WorkoutStatus.PLANNED
        )
        assert [w.id for w in page.items] == [planned.id]

    async def test_invalid_cursor(self, service, owner_ctx):
        with pytest.raises(ValidationError):
            await service.list_by_owner(owner_ctx, PaginationParams(cursor="not-a-cursor"))


class TestUpdate:
    async def test_partial_update_bumps_version(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)

        updated = await service.update(
            owner_ctx, workout.id, UpdateWorkoutRequest(version=0, notes="Felt strong")
        )

        assert updated.notes == "Felt strong"
        assert updated.name == "Leg day"
        assert updated.version == 1

    async def test_stale_version_is_rejected_without_changes(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        workout_id = workout.id
        await service.update(owner_ctx, workout_id, UpdateWorkoutRequest(version=0, name="Renamed"))

        with pytest.raises(OptimisticLockConflictError) as exc_info:
            await service.update(owner_ctx, workout_id, UpdateWorkoutRequest(version=0, name="Lost"))

        assert exc_info.value.details["expected_version"] == 0
        assert exc_info.value.details["actual_version"] == 1
        current = await service.get(owner_ctx, workout_id)
        assert current.name == "Renamed"
        assert current.version == 1

    async def test_update_requires_a_field(self):
        with pytest.raises(ValueError):
            UpdateWorkoutRequest(version=0)

    async def test_null_name_is_rejected(self):
        with pytest.raises(ValueError):
            UpdateWorkoutRequest.model_validate({"version": 0, "name": None})

    async def test_offset_aware_start_is_stored_as_naive_utc(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        workout = await service.perform_action(owner_ctx, workout.id, WorkoutAction.START)
        started = (datetime.utcnow() - timedelta(minutes=5)).replace(microsecond=0)

        updated = await service.update(
            owner_ctx,
            workout.id,
            UpdateWorkoutRequest.model_validate(
                {"version": workout.version, "started_at": started.isoformat() + "+00:00"}
            ),
        )

        assert updated.started_at == started
        assert updated.started_at.tzinfo is None

    async def test_offset_is_converted_before_comparing(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        workout = await service.perform_action(owner_ctx, workout.id, WorkoutAction.START)
        # 30 minutes ago in UTC, written at +02:00, so the local wall time is in the future
        local = datetime.now(timezone(timedelta(hours=2))) - timedelta(minutes=30)

        updated = await service.update(
            owner_ctx,
            workout.id,
            UpdateWorkoutRequest(version=workout.version, started_at=local),
        )

        assert updated.started_at == local.astimezone(timezone.utc).replace(tzinfo=None)

    async def test_start_time_in_future_rejected(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        workout = await service.perform_action(owner_ctx, workout.id, WorkoutAction.START)

        with pytest.raises(ValidationError) as exc_info:
            await service.update(
                owner_ctx,
                workout.id,
                UpdateWorkoutRequest(
                    version=workout.version,
                    started_at=datetime.utcnow() + timedelta(hours=1),
                ),
            )
        assert exc_info.value.code == "VAL_STARTED_AT_001"

    async def test_completed_before_started_rejected(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        await service.perform_action(owner_ctx, workout.id, WorkoutAction.START)
        workout = await service.perform_action(owner_ctx, workout.id, WorkoutAction.COMPLETE)

        with pytest.raises(ValidationError) as exc_info:
            await service.update(
                owner_ctx,
                workout.id,
                UpdateWorkoutRequest(
                    version=workout.version,
                    completed_at=workout.started_at - timedelta(minutes=1),
                ),
            )
        assert exc_info.value.code == "VAL_COMPLETED_AT_001"

    async def test_correcting_times_recomputes_duration(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        await service.perform_action(owner_ctx, workout.id, WorkoutAction.START)
        workout = await service.perform_action(owner_ctx, workout.id, WorkoutAction.COMPLETE)
        started = workout.completed_at - timedelta(minutes=40)

        updated = await service.update(
            owner_ctx, workout.id, UpdateWorkoutRequest(version=workout.version, started_at=started)
        )
        assert updated.actual_duration_minutes == 40

    async def test_completed_at_on_planned_session_rejected(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        with pytest.raises(ValidationError):
            await service.update(
                owner_ctx,
                workout.id,
                UpdateWorkoutRequest(version=0, completed_at=datetime.utcnow() - timedelta(hours=1)),
            )


class TestPerformAction:
    async def test_each_transition_increments_version(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        for expected_version, action in enumerate(
            [WorkoutAction.START, WorkoutAction.PAUSE, WorkoutAction.RESUME, WorkoutAction.COMPLETE],
            start=1,
        ):
            workout = await service.perform_action(owner_ctx, workout.id, action)
            assert workout.version == expected_version
        assert workout.status == WorkoutStatus.COMPLETED

    async def test_pause_on_planned_session_fails(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        workout_id = workout.id

        with pytest.raises(IllegalStateTransitionError) as exc_info:
            await service.perform_action(owner_ctx, workout_id, WorkoutAction.PAUSE)

        assert exc_info.value.details["allowed_actions"] == ["start", "cancel"]
        current = await service.get(owner_ctx, workout_id)
        assert current.status == WorkoutStatus.PLANNED
        assert current.version == 0

    async def test_action_with_stale_version(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        workout_id = workout.id
        await service.perform_action(owner_ctx, workout_id, WorkoutAction.START, expected_version=0)

        with pytest.raises(OptimisticLockConflictError):
            await service.perform_action(
                owner_ctx, workout_id, WorkoutAction.CANCEL, expected_version=0
            )
        assert (await service.get(owner_ctx, workout_id)).status == WorkoutStatus.IN_PROGRESS

    async def test_string_actions_are_accepted(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        workout = await service.perform_action(owner_ctx, workout.id, "cancel")
        assert workout.status == WorkoutStatus.CANCELLED


class TestExercisesInSession:
    async def test_list_is_ordered_by_position(self, service, owner_ctx, catalog):
        workout = await create_workout(service, owner_ctx)
        third = await add_exercise(service, owner_ctx, workout.id, catalog[ExerciseType.CARDIO], order=3)
        first = await add_exercise(service, owner_ctx, workout.id, catalog[ExerciseType.STRENGTH], order=1)

        listed = await service.list_exercises(owner_ctx, workout.id)

        assert [we.id for we in listed] == [first.id, third.id]
        assert listed[0].exercise.type == ExerciseType.STRENGTH

    async def test_duplicate_position_conflicts(self, service, owner_ctx, catalog):
        workout = await create_workout(service, owner_ctx)
        await add_exercise(service, owner_ctx, workout.id, catalog[ExerciseType.STRENGTH], order=1)

        with pytest.raises(ConflictError) as exc_info:
            await add_exercise(service, owner_ctx, workout.id, catalog[ExerciseType.CARDIO], order=1)
        assert exc_info.value.code == "CF_EXERCISE_ORDER"

    async def test_unknown_catalog_exercise(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        with pytest.raises(NotFoundError):
            await service.add_exercise(
                owner_ctx, workout.id, AddWorkoutExerciseRequest(exercise_id=424242, order_in_workout=1)
            )

    async def test_update_exercise_is_version_guarded(self, service, owner_ctx, catalog):
        workout = await create_workout(service, owner_ctx)
        we = await add_exercise(service, owner_ctx, workout.id, catalog[ExerciseType.STRENGTH])

        updated = await service.update_exercise(
            owner_ctx, we.id, UpdateWorkoutExerciseRequest(version=0, order_in_workout=4, notes="Wide grip")
        )
        assert (updated.order_in_workout, updated.notes, updated.version) == (4, "Wide grip", 1)

        with pytest.raises(OptimisticLockConflictError):
            await service.update_exercise(
                owner_ctx, we.id, UpdateWorkoutExerciseRequest(version=0, notes="Narrow grip")
            )

    async def test_null_position_alone_is_not_an_update(self):
        with pytest.raises(ValueError):
            UpdateWorkoutExerciseRequest.model_validate({"version": 0, "order_in_workout": None})

    async def test_null_position_keeps_current_one(self, service, owner_ctx, catalog):
        workout = await create_workout(service, owner_ctx)
        we = await add_exercise(service, owner_ctx, workout.id, catalog[ExerciseType.STRENGTH], order=2)

        updated = await service.update_exercise(
            owner_ctx,
            we.id,
            UpdateWorkoutExerciseRequest.model_validate(
                {"version": 0, "order_in_workout": None, "notes": "Pause reps"}
            ),
        )

        assert (updated.order_in_workout, updated.notes, updated.version) == (2, "Pause reps", 1)

    async def test_removed_position_can_be_reused(self, service, owner_ctx, catalog):
        workout = await create_workout(service, owner_ctx)
        we = await add_exercise(service, owner_ctx, workout.id, catalog[ExerciseType.STRENGTH])
        await service.remove_exercise(owner_ctx, we.id)

        replacement = await add_exercise(service, owner_ctx, workout.id, catalog[ExerciseType.CARDIO])
        assert [e.id for e in await service.list_exercises(owner_ctx, workout.id)] == [replacement.id]

    async def test_remove_exercise_cascades_to_sets(self, service, db_session, session_maker, owner_ctx, catalog):
        workout = await create_workout(service, owner_ctx)
        we = await add_exercise(service, owner_ctx, workout.id, catalog[ExerciseType.STRENGTH])
        strength = SetService(db_session, ExerciseType.STRENGTH)
        await strength.create(owner_ctx, we.id, SetVariant.strength(1, reps=5, weight=Decimal("60")))
        await db_session.commit()

        await service.remove_exercise(owner_ctx, we.id)
        await db_session.commit()

        with pytest.raises(NotFoundError):
            await service.get_exercise(owner_ctx, we.id)
        async with session_maker() as fresh:
            rows = (await fresh.execute(select(StrengthSet))).scalars().all()
        assert [row.deleted for row in rows] == [True]


class TestDeleteAndRestore:
    async def _populated_workout(self, service, db_session, owner_ctx, catalog):
        workout = await create_workout(service, owner_ctx)
        lift = await add_exercise(service, owner_ctx, workout.id, catalog[ExerciseType.STRENGTH], order=1)
        run = await add_exercise(service, owner_ctx, workout.id, catalog[ExerciseType.CARDIO], order=2)
        strength = SetService(db_session, ExerciseType.STRENGTH)
        cardio = SetService(db_session, ExerciseType.CARDIO)
        await strength.create(owner_ctx, lift.id, SetVariant.strength(1, reps=8, weight=Decimal("80")))
        await strength.create(owner_ctx, lift.id, SetVariant.strength(2, reps=6, weight=Decimal("90")))
        await cardio.create(owner_ctx, run.id, SetVariant.cardio(1, duration_seconds=600))
        await db_session.commit()
        return workout, lift, run

    async def test_delete_cascades_to_exercises_and_sets(
        self, service, db_session, session_maker, owner_ctx, catalog
    ):
        workout, lift, run = await self._populated_workout(service, db_session, owner_ctx, catalog)

        await service.delete(owner_ctx, workout.id)
        await db_session.commit()

        with pytest.raises(NotFoundError):
            await service.get(owner_ctx, workout.id)
        with pytest.raises(NotFoundError):
            await service.get_exercise(owner_ctx, lift.id)
        with pytest.raises(NotFoundError):
            await SetService(db_session, ExerciseType.CARDIO).list_for_exercise(owner_ctx, run.id)
        page = await service.list_by_owner(owner_ctx, PaginationParams())
        assert page.items == []

        async with session_maker() as fresh:
            deleted_session = await fresh.get(WorkoutSession, workout.id)
            exercises = (await fresh.execute(select(WorkoutExercise))).scalars().all()
            sets = [
                *(await fresh.execute(select(StrengthSet))).scalars().all(),
                *(await fresh.execute(select(CardioSet))).scalars().all(),
            ]
        assert deleted_session.deleted is True
        assert all(e.deleted and e.deleted_at == deleted_session.deleted_at for e in exercises)
        assert len(sets) == 3
        assert all(s.deleted and s.deleted_at == deleted_session.deleted_at for s in sets)

    async def test_restore_brings_back_the_subtree(self, service, db_session, owner_ctx, catalog):
        workout, lift, run = await self._populated_workout(service, db_session, owner_ctx, catalog)
        await service.delete(owner_ctx, workout.id)
        await db_session.commit()

        restored = await service.restore(owner_ctx, workout.id)
        await db_session.commit()

        assert restored.is_active
        assert restored.version == 2
        loaded = await service.get_with_smart_loaded_sets(owner_ctx, workout.id)
        assert [item.workout_exercise.id for item in loaded.exercises] == [lift.id, run.id]
        assert [len(item.sets) for item in loaded.exercises] == [2, 1]

    async def test_restore_skips_children_removed_earlier(self, service, db_session, owner_ctx, catalog):
        workout, lift, run = await self._populated_workout(service, db_session, owner_ctx, catalog)
        await service.remove_exercise(owner_ctx, run.id)
        await db_session.commit()
        await service.delete(owner_ctx, workout.id)
        await db_session.commit()

        await service.restore(owner_ctx, workout.id)
        await db_session.commit()

        assert [we.id for we in await service.list_exercises(owner_ctx, workout.id)] == [lift.id]

    async def test_restore_active_session_is_a_business_error(self, service, owner_ctx):
        workout = await create_workout(service, owner_ctx)
        with pytest.raises(BusinessRuleError):
            await service.restore(owner_ctx, workout.id)

    async def test_delete_with_stale_version_keeps_everything(self, service, db_session, owner_ctx, catalog):
        workout, lift, _ = await self._populated_workout(service, db_session, owner_ctx, catalog)
        workout_id = workout.id
        await service.update(owner_ctx, workout_id, UpdateWorkoutRequest(version=0, notes="bump"))
        await db_session.commit()

        with pytest.raises(OptimisticLockConflictError):
            await service.delete(owner_ctx, workout_id, expected_version=0)
        await db_session.rollback()

        assert (await service.get(owner_ctx, workout_id)).is_active
        assert len(await service.list_exercises(owner_ctx, workout_id)) == 2


class TestScenarios:
    async def test_plan_lift_and_complete(self, service, db_session, owner_ctx, catalog):
        workout = await create_workout(service, owner_ctx)
        assert workout.status == WorkoutStatus.PLANNED
        we = await add_exercise(service, owner_ctx, workout.id, catalog[ExerciseType.STRENGTH])
        strength = SetService(db_session, ExerciseType.STRENGTH)
        created = await strength.create(
            owner_ctx, we.id, SetVariant.strength(1, reps=10, weight=Decimal("100"))
        )

        await service.perform_action(owner_ctx, workout.id, WorkoutAction.START)
        workout = await service.perform_action(owner_ctx, workout.id, WorkoutAction.COMPLETE)

        assert workout.status == WorkoutStatus.COMPLETED
        assert workout.actual_duration_minutes >= 0
        assert workout.completed_at >= workout.started_at
        fetched = await strength.get(owner_ctx, created.id)
        assert fetched.workout_exercise_id == we.id
        assert fetched.payload.reps == 10
        assert fetched.payload.weight == Decimal("100")
