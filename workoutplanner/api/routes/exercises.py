"""API routes for the exercise catalog."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from workoutplanner.api.routes.dependencies import get_access_context
from workoutplanner.db.database import get_db
from workoutplanner.models.enums import ExerciseType, TargetMuscleGroup
from workoutplanner.schemas.exercise import (
    CreateExerciseRequest,
    ExerciseListResponse,
    ExerciseResponse,
)
from workoutplanner.schemas.pagination import PaginationParams
from workoutplanner.security.access import AccessContext
from workoutplanner.services.exercise_catalog_service import ExerciseCatalogService

router = APIRouter(prefix="/exercises", tags=["exercises"])


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> ExerciseCatalogService:
    return ExerciseCatalogService(db)


@router.get("", response_model=ExerciseListResponse)
async def list_exercises(
    type: ExerciseType | None = Query(None),
    target_muscle_group: TargetMuscleGroup | None = Query(None),
    search: str | None = Query(None, max_length=100),
    cursor: str | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    ctx: AccessContext = Depends(get_access_context),
    service: ExerciseCatalogService = Depends(get_catalog_service),
):
    page = await service.list(
        PaginationParams(cursor=cursor, limit=limit),
        type=type,
        target_muscle_group=target_muscle_group,
        search=search,
    )
    return ExerciseListResponse(
        items=[ExerciseResponse.model_validate(e) for e in page.items],
        next_cursor=page.next_cursor,
        has_more=page.has_more,
    )


@router.get("/{exercise_id}", response_model=ExerciseResponse)
async def get_exercise(
    exercise_id: int,
    ctx: AccessContext = Depends(get_access_context),
    service: ExerciseCatalogService = Depends(get_catalog_service),
):
    return await service.get(exercise_id)


@router.post("", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
async def create_exercise(
    request: CreateExerciseRequest,
    ctx: AccessContext = Depends(get_access_context),
    service: ExerciseCatalogService = Depends(get_catalog_service),
):
    return await service.create(ctx, request)
