"""API routes for sets, one route group per variant.

The variant is fixed by the path (``/sets/strength`` etc.), so a request
body is always parsed with that variant's schema.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from workoutplanner.api.routes.dependencies import get_access_context
from workoutplanner.db.database import get_db
from workoutplanner.models.enums import ExerciseType
from workoutplanner.schemas.sets import (
    CreateCardioSetRequest,
    CreateFlexibilitySetRequest,
    CreateStrengthSetRequest,
    SetResponse,
    UpdateCardioSetRequest,
    UpdateFlexibilitySetRequest,
    UpdateStrengthSetRequest,
)
from workoutplanner.security.access import AccessContext
from workoutplanner.services.set_service import SetService

router = APIRouter(prefix="/sets", tags=["sets"])


def _build_variant_router(set_type: ExerciseType, create_schema, update_schema) -> APIRouter:
    variant_router = APIRouter(prefix=f"/{set_type.value.lower()}")

    def get_set_service(db: AsyncSession = Depends(get_db)) -> SetService:
        return SetService(db, set_type)

    @variant_router.post(
        "/exercise/{workout_exercise_id}",
        response_model=SetResponse,
        status_code=status.HTTP_201_CREATED,
        name=f"create_{set_type.value.lower()}_set",
    )
    async def create_set(
        workout_exercise_id: int,
        request: create_schema,
        ctx: AccessContext = Depends(get_access_context),
        service: SetService = Depends(get_set_service),
    ):
        variant = await service.create(ctx, workout_exercise_id, request.to_variant())
        return SetResponse.from_variant(variant)

    @variant_router.get(
        "/exercise/{workout_exercise_id}",
        response_model=list[SetResponse],
        name=f"list_{set_type.value.lower()}_sets",
    )
    async def list_sets(
        workout_exercise_id: int,
        ctx: AccessContext = Depends(get_access_context),
        service: SetService = Depends(get_set_service),
    ):
        return [
            SetResponse.from_variant(v)
            for v in await service.list_for_exercise(ctx, workout_exercise_id)
        ]

    @variant_router.get(
        "/{set_id}", response_model=SetResponse, name=f"get_{set_type.value.lower()}_set"
    )
    async def get_set(
        set_id: int,
        ctx: AccessContext = Depends(get_access_context),
        service: SetService = Depends(get_set_service),
    ):
        return SetResponse.from_variant(await service.get(ctx, set_id))

    @variant_router.put(
        "/{set_id}", response_model=SetResponse, name=f"update_{set_type.value.lower()}_set"
    )
    async def update_set(
        set_id: int,
        request: update_schema,
        ctx: AccessContext = Depends(get_access_context),
        service: SetService = Depends(get_set_service),
    ):
        variant = await service.update(
            ctx, set_id, request.to_variant(), expected_version=request.version
        )
        return SetResponse.from_variant(variant)

    @variant_router.delete(
        "/{set_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        name=f"delete_{set_type.value.lower()}_set",
    )
    async def delete_set(
        set_id: int,
        version: int | None = Query(None, ge=0),
        ctx: AccessContext = Depends(get_access_context),
        service: SetService = Depends(get_set_service),
    ):
        await service.delete(ctx, set_id, expected_version=version)

    return variant_router


router.include_router(
    _build_variant_router(ExerciseType.STRENGTH, CreateStrengthSetRequest, UpdateStrengthSetRequest)
)
router.include_router(
    _build_variant_router(ExerciseType.CARDIO, CreateCardioSetRequest, UpdateCardioSetRequest)
)
router.include_router(
    _build_variant_router(
        ExerciseType.FLEXIBILITY, CreateFlexibilitySetRequest, UpdateFlexibilitySetRequest
    )
)
