"""Health check endpoint."""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from workoutplanner.config.settings import get_settings
from workoutplanner.db.database import get_db

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Report liveness and whether the database answers."""
    settings = get_settings()
    try:
        await db.execute(text("SELECT 1"))
        database = "healthy"
    except Exception:
        database = "unhealthy"
    return {
        "status": "healthy" if database == "healthy" else "degraded",
        "app": settings.app_name,
        "database": database,
    }
