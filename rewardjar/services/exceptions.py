# rewardjar/services/exceptions.py
"""
Domain exceptions for the token jar services.

Services raise these for rule violations and store problems; the API layer
turns them into the response envelope using `status_code`. `message` is what
the caller sees, so it never carries database detail; `details` is for logs.
"""

from typing import Any, Dict, Optional


class RewardJarError(Exception):
    """Base class for every error a service can raise."""

    status_code: int = 400
    error_code: str = "REWARD_JAR_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(RewardJarError):
    """Malformed or missing input."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class NotFoundError(RewardJarError):
    """An id does not resolve to a record of the expected kind."""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, record_id: str):
        super().__init__(
            f"{resource} not found",
            {"resource": resource, "id": record_id},
        )


class InvalidReferenceError(RewardJarError):
    """A reward's tokenType does not resolve to an existing token."""

    status_code = 400
    error_code = "INVALID_REFERENCE"

    def __init__(self, token_type: str):
        super().__init__("Invalid token type", {"token_type": token_type})


class InsufficientBalanceError(RewardJarError):
    """Spend amount exceeds the jar's current count."""

    status_code = 400
    error_code = "INSUFFICIENT_BALANCE"

    def __init__(self, token_id: str, required: int, available: int):
        super().__init__(
            "Insufficient tokens",
            {"token_id": token_id, "required": required, "available": available},
        )
        self.required = required
        self.available = available


class ConflictError(RewardJarError):
    """A conditional write kept losing to concurrent writers."""

    status_code = 409
    error_code = "CONFLICT"


class StoreFailureError(RewardJarError):
    """The record store itself failed."""

    status_code = 500
    error_code = "STORE_FAILURE"
