"""API routes for workout sessions and the exercises inside them."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from workoutplanner.api.routes.dependencies import get_access_context
from workoutplanner.db.database import get_db
from workoutplanner.models.enums import WorkoutStatus
from workoutplanner.schemas.pagination import PaginationParams
from workoutplanner.schemas.workout import (
    AddWorkoutExerciseRequest,
    CreateWorkoutRequest,
    UpdateWorkoutExerciseRequest,
    UpdateWorkoutRequest,
    WorkoutActionRequest,
    WorkoutDetailResponse,
    WorkoutExerciseResponse,
    WorkoutListResponse,
    WorkoutResponse,
)
from workoutplanner.security.access import AccessContext
from workoutplanner.services.workout_session_service import WorkoutSessionService

router = APIRouter(prefix="/workouts", tags=["workouts"])


def get_workout_service(db: AsyncSession = Depends(get_db)) -> WorkoutSessionService:
    return WorkoutSessionService(db)


@router.post("", response_model=WorkoutResponse, status_code=status.HTTP_201_CREATED)
async def create_workout(
    request: CreateWorkoutRequest,
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    return await service.create(ctx, request)


@router.get("", response_model=WorkoutListResponse)
async def list_my_workouts(
    cursor: str | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    status_filter: WorkoutStatus | None = Query(None, alias="status"),
    user_id: int | None = Query(None, description="Owner to list; admins only"),
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    page = await service.list_by_owner(
        ctx, PaginationParams(cursor=cursor, limit=limit), owner_id=user_id, status=status_filter
    )
    return WorkoutListResponse(
        items=[WorkoutResponse.model_validate(w) for w in page.items],
        next_cursor=page.next_cursor,
        has_more=page.has_more,
    )


@router.get("/{workout_id}", response_model=WorkoutResponse)
async def get_workout(
    workout_id: int,
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    return await service.get(ctx, workout_id)


@router.get("/{workout_id}/smart", response_model=WorkoutDetailResponse)
async def get_workout_with_sets(
    workout_id: int,
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    """Session with each exercise's sets, reading each variant table at most once."""
    return WorkoutDetailResponse.from_loaded(
        await service.get_with_smart_loaded_sets(ctx, workout_id)
    )


@router.get("/{workout_id}/full", response_model=WorkoutDetailResponse)
async def get_workout_with_all_sets(
    workout_id: int,
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    return WorkoutDetailResponse.from_loaded(await service.get_with_all_sets(ctx, workout_id))


@router.patch("/{workout_id}", response_model=WorkoutResponse)
async def update_workout(
    workout_id: int,
    request: UpdateWorkoutRequest,
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    return await service.update(ctx, workout_id, request)


@router.delete("/{workout_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_workout(
    workout_id: int,
    version: int | None = Query(None, ge=0),
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    await service.delete(ctx, workout_id, expected_version=version)


@router.post("/{workout_id}/restore", response_model=WorkoutResponse)
async def restore_workout(
    workout_id: int,
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    return await service.restore(ctx, workout_id)


@router.post("/{workout_id}/actions", response_model=WorkoutResponse)
async def perform_workout_action(
    workout_id: int,
    request: WorkoutActionRequest,
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    return await service.perform_action(
        ctx, workout_id, request.action, expected_version=request.version
    )


@router.post(
    "/{workout_id}/exercises",
    response_model=WorkoutExerciseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_exercise(
    workout_id: int,
    request: AddWorkoutExerciseRequest,
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    return WorkoutExerciseResponse.from_model(await service.add_exercise(ctx, workout_id, request))


@router.get("/{workout_id}/exercises", response_model=list[WorkoutExerciseResponse])
async def list_exercises(
    workout_id: int,
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    return [
        WorkoutExerciseResponse.from_model(we)
        for we in await service.list_exercises(ctx, workout_id)
    ]


@router.patch("/exercises/{workout_exercise_id}", response_model=WorkoutExerciseResponse)
async def update_exercise(
    workout_exercise_id: int,
    request: UpdateWorkoutExerciseRequest,
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    return WorkoutExerciseResponse.from_model(
        await service.update_exercise(ctx, workout_exercise_id, request)
    )


@router.delete("/exercises/{workout_exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_exercise(
    workout_exercise_id: int,
    version: int | None = Query(None, ge=0),
    ctx: AccessContext = Depends(get_access_context),
    service: WorkoutSessionService = Depends(get_workout_service),
):
    await service.remove_exercise(ctx, workout_exercise_id, expected_version=version)
