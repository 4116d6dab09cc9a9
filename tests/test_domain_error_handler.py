"""Tests for the domain error handler and the error envelope it renders."""
import json
from datetime import datetime
from types import SimpleNamespace

import pytest
from fastapi.responses import JSONResponse

from workoutplanner.core.error_handlers import ERROR_STATUS_MAP, domain_error_handler
from workoutplanner.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessRuleError,
    ConflictError,
    DomainError,
    IllegalStateTransitionError,
    NotFoundError,
    OptimisticLockConflictError,
    ValidationError,
)


class MockRequest:
    """Just enough of a Starlette request for the handler."""

    def __init__(self, request_id: str | None = "test-request-123", path: str = "/workouts/1"):
        self.state = SimpleNamespace(request_id=request_id)
        self.url = SimpleNamespace(path=path)


async def render(error: DomainError, request_id: str | None = "req-1") -> tuple[int, dict]:
    response = await domain_error_handler(MockRequest(request_id), error)
    assert isinstance(response, JSONResponse)
    return response.status_code, json.loads(response.body.decode())


class TestDomainErrorExceptions:
    def test_not_found_error_code_from_entity(self):
        error = NotFoundError("WorkoutSession", details={"entity": "WorkoutSession", "id": 7})

        assert error.code == "NF_WORKOUTSESSION_001"
        assert error.message == "WorkoutSession not found"
        assert error.details == {"entity": "WorkoutSession", "id": 7}

    def test_validation_error_defaults_details_to_field(self):
        error = ValidationError("reps", "must be at least 1")

        assert error.code == "VAL_REPS_001"
        assert error.message == "Validation failed for reps: must be at least 1"
        assert error.details == {"field": "reps"}

    def test_business_rule_and_conflict_defaults(self):
        assert BusinessRuleError("nope").code == "BR_001"
        assert ConflictError("taken").code == "CF_001"
        assert AuthenticationError("who").code == "AUTH_001"
        assert AuthorizationError("no").code == "AUTH_006"

    def test_optimistic_lock_conflict_is_a_conflict(self):
        error = OptimisticLockConflictError("WorkoutSession", 12, expected_version=2, actual_version=3)

        assert isinstance(error, ConflictError)
        assert error.code == "CF_VERSION_CONFLICT"
        assert error.details == {
            "entity": "WorkoutSession",
            "id": 12,
            "expected_version": 2,
            "actual_version": 3,
            "retryable": True,
        }
        assert "modified concurrently" in error.message

    def test_illegal_transition_lists_allowed_actions(self):
        error = IllegalStateTransitionError("COMPLETED", "start", [], details={"id": 4})

        assert error.code == "ST_ILLEGAL_TRANSITION"
        assert error.details == {
            "current_status": "COMPLETED",
            "action": "start",
            "allowed_actions": [],
            "id": 4,
        }
        assert "allowed: none" in error.message


class TestErrorStatusMap:
    @pytest.mark.parametrize(
        "error_type, status_code",
        [
            (NotFoundError, 404),
            (ValidationError, 400),
            (BusinessRuleError, 422),
            (ConflictError, 409),
            (OptimisticLockConflictError, 409),
            (IllegalStateTransitionError, 409),
            (AuthenticationError, 401),
            (AuthorizationError, 403),
        ],
    )
    def test_status_for(self, error_type, status_code):
        assert ERROR_STATUS_MAP[error_type] == status_code


class TestDomainErrorHandler:
    async def test_not_found_envelope(self):
        status_code, body = await render(
            NotFoundError("StrengthSet", "StrengthSet with id 999 not found", {"id": 999}), "req-123"
        )

        assert status_code == 404
        assert body["data"] is None
        assert body["meta"]["request_id"] == "req-123"
        assert body["errors"] == [
            {
                "code": "NF_STRENGTHSET_001",
                "message": "StrengthSet with id 999 not found",
                "details": {"id": 999},
            }
        ]

    async def test_version_conflict_envelope(self):
        status_code, body = await render(OptimisticLockConflictError("WorkoutExercise", 3, 0, 1))

        assert status_code == 409
        error = body["errors"][0]
        assert error["code"] == "CF_VERSION_CONFLICT"
        assert error["details"]["retryable"] is True
        assert error["details"]["actual_version"] == 1

    async def test_illegal_transition_envelope(self):
        status_code, body = await render(
            IllegalStateTransitionError("PLANNED", "complete", ["start", "cancel"])
        )

        assert status_code == 409
        error = body["errors"][0]
        assert error["code"] == "ST_ILLEGAL_TRANSITION"
        assert error["details"]["allowed_actions"] == ["start", "cancel"]

    async def test_business_rule_envelope(self):
        status_code, body = await render(
            BusinessRuleError(
                "Cannot record a cardio set on a strength exercise",
                code="BR_SET_TYPE_MISMATCH",
                details={"exercise_type": "STRENGTH", "set_type": "CARDIO"},
            )
        )

        assert status_code == 422
        assert body["errors"][0]["code"] == "BR_SET_TYPE_MISMATCH"

    async def test_timestamp_is_iso(self):
        _, body = await render(NotFoundError("User"))

        datetime.fromisoformat(body["meta"]["timestamp"].replace("Z", "+00:00"))

    async def test_unmapped_error_is_500(self):
        class CustomDomainError(DomainError):
            pass

        status_code, body = await render(CustomDomainError("CUSTOM_001", "Custom error message"))

        assert status_code == 500
        assert body["errors"][0]["code"] == "CUSTOM_001"

    async def test_missing_request_id(self):
        request = SimpleNamespace(state=SimpleNamespace(), url=SimpleNamespace(path="/health"))

        response = await domain_error_handler(request, ValidationError("name", "is required"))

        assert json.loads(response.body.decode())["meta"]["request_id"] is None

    async def test_every_error_shares_the_envelope(self):
        errors = [
            NotFoundError("Exercise"),
            ValidationError("intensity", "must be at most 10"),
            BusinessRuleError("limit reached"),
            ConflictError("order taken", code="CF_EXERCISE_ORDER"),
            OptimisticLockConflictError("StrengthSet", 1, 0, 2),
            IllegalStateTransitionError("CANCELLED", "resume", []),
            AuthenticationError("Missing bearer token"),
            AuthorizationError("Not your workout"),
        ]
        for error in errors:
            _, body = await render(error)
            assert set(body) == {"data", "meta", "errors"}
            assert set(body["errors"][0]) == {"code", "message", "details"}
            assert isinstance(body["errors"][0]["details"], dict)
