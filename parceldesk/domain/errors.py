"""Typed errors raised by lifecycle operations and their collaborators."""

from __future__ import annotations

from typing import Any


class LifecycleError(Exception):
    """Base class for every error the service reports to callers."""

    code = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnauthenticatedError(LifecycleError):
    code = "unauthenticated"


class ForbiddenError(LifecycleError):
    code = "forbidden"


class NotFoundError(LifecycleError):
    code = "not_found"

    def __init__(self, resource: str, resource_id: Any = None):
        self.resource = resource
        self.resource_id = resource_id
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} {resource_id} not found"
        super().__init__(message)


class InvalidArgumentError(LifecycleError):
    code = "invalid_argument"


class InvalidStateTransition(LifecycleError):
    """Raised when a status change violates one of the state machines."""

    code = "invalid_transition"


class UpstreamFailure(LifecycleError):
    code = "upstream_failure"


class ChargeError(UpstreamFailure):
    """The payment provider refused or failed to create a charge."""
