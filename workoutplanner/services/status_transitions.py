"""Workout session lifecycle.

    PLANNED --start--> IN_PROGRESS <--pause/resume--> PAUSED
    IN_PROGRESS, PAUSED --complete--> COMPLETED
    PLANNED, IN_PROGRESS, PAUSED --cancel--> CANCELLED

COMPLETED and CANCELLED are terminal. ``apply_action`` validates the
action before touching the session, so a rejected action leaves it as it
was.
"""
from dataclasses import dataclass
from datetime import datetime

from workoutplanner.core.exceptions import IllegalStateTransitionError, ValidationError
from workoutplanner.models.enums import WorkoutAction, WorkoutStatus
from workoutplanner.models.workout import WorkoutSession


@dataclass(frozen=True)
class Transition:
    sources: frozenset[WorkoutStatus]
    target: WorkoutStatus


TRANSITIONS: dict[WorkoutAction, Transition] = {
    WorkoutAction.START: Transition(
        frozenset({WorkoutStatus.PLANNED}), WorkoutStatus.IN_PROGRESS
    ),
    WorkoutAction.PAUSE: Transition(
        frozenset({WorkoutStatus.IN_PROGRESS}), WorkoutStatus.PAUSED
    ),
    WorkoutAction.RESUME: Transition(
        frozenset({WorkoutStatus.PAUSED}), WorkoutStatus.IN_PROGRESS
    ),
    WorkoutAction.COMPLETE: Transition(
        frozenset({WorkoutStatus.IN_PROGRESS, WorkoutStatus.PAUSED}), WorkoutStatus.COMPLETED
    ),
    WorkoutAction.CANCEL: Transition(
        frozenset({WorkoutStatus.PLANNED, WorkoutStatus.IN_PROGRESS, WorkoutStatus.PAUSED}),
        WorkoutStatus.CANCELLED,
    ),
}


def parse_action(action: str | WorkoutAction) -> WorkoutAction:
    if isinstance(action, WorkoutAction):
        return action
    try:
        return WorkoutAction(str(action).strip().lower())
    except ValueError:
        raise ValidationError(
            "action",
            f"Unknown action '{action}'",
            {"field": "action", "allowed": [a.value for a in WorkoutAction]},
        )


def allowed_actions(status: WorkoutStatus) -> list[WorkoutAction]:
    """Actions legal from ``status``, in declaration order."""
    return [action for action, t in TRANSITIONS.items() if status in t.sources]


def ensure_allowed(status: WorkoutStatus, action: WorkoutAction) -> Transition:
    transition = TRANSITIONS[action]
    if status not in transition.sources:
        raise IllegalStateTransitionError(
            current_status=WorkoutStatus(status).value,
            action=action.value,
            allowed_actions=[a.value for a in allowed_actions(status)],
        )
    return transition


def duration_minutes(started_at: datetime | None, completed_at: datetime) -> int:
    if started_at is None:
        return 0
    return max(0, round((completed_at - started_at).total_seconds() / 60))


def apply_action(
    workout: WorkoutSession,
    action: str | WorkoutAction,
    now: datetime | None = None,
) -> WorkoutStatus:
    """Apply ``action`` to ``workout`` in memory and return the previous status."""
    action = parse_action(action)
    previous = WorkoutStatus(workout.status)
    transition = ensure_allowed(previous, action)
    now = now or datetime.utcnow()

    match action:
        case WorkoutAction.START:
            workout.started_at = now
        case WorkoutAction.COMPLETE:
            started_at = workout.started_at or now
            completed_at = max(now, started_at)
            workout.started_at = started_at
            workout.completed_at = completed_at
            workout.actual_duration_minutes = duration_minutes(started_at, completed_at)

    workout.status = transition.target
    return previous
