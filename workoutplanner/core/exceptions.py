class DomainError(Exception):
    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(DomainError):
    def __init__(self, entity: str, message: str | None = None, details: dict | None = None):
        code = f"NF_{entity.upper()}_001"
        msg = message or f"{entity} not found"
        super().__init__(code, msg, details)


class ValidationError(DomainError):
    def __init__(self, field: str, message: str, details: dict | None = None):
        code = f"VAL_{field.upper()}_001"
        msg = f"Validation failed for {field}: {message}"
        super().__init__(code, msg, details or {"field": field})


class BusinessRuleError(DomainError):
    def __init__(self, message: str, code: str = "BR_001", details: dict | None = None):
        super().__init__(code, message, details)


class ConflictError(DomainError):
    def __init__(self, message: str, code: str = "CF_001", details: dict | None = None):
        super().__init__(code, message, details)


class OptimisticLockConflictError(ConflictError):
    """Raised when a write presents a version that is no longer current.

    Callers may retry after re-reading the entity; nothing was written.
    """

    def __init__(
        self,
        entity: str,
        entity_id: int,
        expected_version: int | None,
        actual_version: int | None,
    ):
        super().__init__(
            f"{entity} {entity_id} was modified concurrently. Please refresh and try again.",
            code="CF_VERSION_CONFLICT",
            details={
                "entity": entity,
                "id": entity_id,
                "expected_version": expected_version,
                "actual_version": actual_version,
                "retryable": True,
            },
        )


class IllegalStateTransitionError(DomainError):
    def __init__(
        self,
        current_status: str,
        action: str,
        allowed_actions: list[str],
        details: dict | None = None,
    ):
        allowed = ", ".join(allowed_actions) or "none"
        super().__init__(
            "ST_ILLEGAL_TRANSITION",
            f"Cannot {action} a workout session in status {current_status} (allowed: {allowed})",
            {
                "current_status": current_status,
                "action": action,
                "allowed_actions": allowed_actions,
                **(details or {}),
            },
        )


class AuthenticationError(DomainError):
    def __init__(self, message: str, code: str = "AUTH_001", details: dict | None = None):
        super().__init__(code, message, details)


class AuthorizationError(DomainError):
    def __init__(self, message: str, code: str = "AUTH_006", details: dict | None = None):
        super().__init__(code, message, details)
