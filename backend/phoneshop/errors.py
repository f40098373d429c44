from __future__ import annotations
"""Service-level error taxonomy.

Services raise these instead of aborting so they stay usable outside a request;
the application error handler maps them to the standard JSON error shape.
"""


class ShopError(Exception):
    """Base class for recoverable domain errors."""
    status_code = 400
    title = 'Bad Request'


class NotFoundError(ShopError):
    """Raised when an id does not resolve to an existing entity."""
    status_code = 404
    title = 'Not Found'


class InvalidReferenceError(ShopError):
    """Raised when a new record points at a parent entity that does not exist."""


class ValidationError(ShopError):
    """Raised when payload data fails validation."""


class InvalidTransitionError(ShopError):
    """Raised when a lifecycle status change is not allowed."""


__all__ = ['ShopError', 'NotFoundError', 'InvalidReferenceError', 'ValidationError', 'InvalidTransitionError']
