"""Shared fixtures.

Each test gets its own file-backed SQLite database so that separate
sessions really use separate connections (needed for stale-version tests).
"""
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from workoutplanner.db.database import (
    create_engine_for_url,
    create_session_maker,
    get_db,
    init_db,
)
from workoutplanner.models import (
    DifficultyLevel,
    Exercise,
    ExerciseType,
    TargetMuscleGroup,
    User,
    UserRole,
)
from workoutplanner.security.access import AccessContext
from workoutplanner.security.jwt_utils import create_access_token


@pytest.fixture
async def engine(tmp_path):
    engine = create_engine_for_url(f"sqlite+aiosqlite:///{tmp_path / 'workouts.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return create_session_maker(engine)


@pytest.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


async def _seed(session_maker, *entities):
    async with session_maker() as session:
        session.add_all(entities)
        await session.commit()
    return entities


@pytest.fixture
async def users(session_maker) -> dict[str, User]:
    owner = User(external_id="auth0|owner", username="owner", email="owner@example.com",
                 first_name="Olive", last_name="Owner", role=UserRole.USER, version=0)
    other = User(external_id="auth0|other", username="other", email="other@example.com",
                 role=UserRole.USER, version=0)
    admin = User(external_id="auth0|admin", username="admin", email="admin@example.com",
                 role=UserRole.ADMIN, version=0)
    await _seed(session_maker, owner, other, admin)
    return {"owner": owner, "other": other, "admin": admin}


@pytest.fixture
async def catalog(session_maker) -> dict[ExerciseType, Exercise]:
    entries = {
        ExerciseType.STRENGTH: Exercise(
            name="Bench Press",
            type=ExerciseType.STRENGTH,
            target_muscle_group=TargetMuscleGroup.CHEST,
            difficulty_level=DifficultyLevel.INTERMEDIATE,
            version=0,
        ),
        ExerciseType.CARDIO: Exercise(
            name="Treadmill Run",
            type=ExerciseType.CARDIO,
            target_muscle_group=TargetMuscleGroup.FULL_BODY,
            difficulty_level=DifficultyLevel.BEGINNER,
            version=0,
        ),
        ExerciseType.FLEXIBILITY: Exercise(
            name="Hamstring Stretch",
            type=ExerciseType.FLEXIBILITY,
            target_muscle_group=TargetMuscleGroup.HAMSTRINGS,
            difficulty_level=DifficultyLevel.BEGINNER,
            version=0,
        ),
    }
    await _seed(session_maker, *entries.values())
    return entries


@pytest.fixture
def owner_ctx(users) -> AccessContext:
    return AccessContext.for_user(users["owner"])


@pytest.fixture
def other_ctx(users) -> AccessContext:
    return AccessContext.for_user(users["other"])


@pytest.fixture
def admin_ctx(users) -> AccessContext:
    return AccessContext.for_user(users["admin"])


@pytest.fixture
def auth_headers():
    """Build bearer headers for a seeded user."""

    def _headers(user: User) -> dict:
        token = create_access_token({"sub": user.external_id, "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, with ``get_db`` bound to the test database."""
    from workoutplanner.main import create_app

    app = create_app(use_lifespan=False)

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
