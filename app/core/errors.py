"""
Offering error taxonomy.

This module defines the exceptions raised by the offering coordinator and
its collaborators, and the category/status pair each one maps to at the
HTTP boundary.

Categories:
    - ``MissingField``: a required sub-request of an offering is absent.
    - ``InvalidInput``: a sub-request could not be transformed into its
      domain entity (malformed policy, missing selector, ...).
    - ``PersistenceFailure``: a store rejected a create, save or update.
      On the create path it is raised after compensation has been attempted.

``PersistenceError`` is the lower-level exception raised by store adapters.
The coordinator never lets it escape directly; it is always re-raised as the
``__cause__`` of a ``PersistenceFailure``.
"""

from typing import Optional


class OfferingError(Exception):
    """
    Base class for errors surfaced by the offering coordinator.

    Attributes:
        category (str): Stable error category used in response bodies.
        status_code (int): HTTP status the boundary maps this error to.
    """

    category = "offering_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": self.category, "message": self.message}


class InvalidInput(OfferingError):
    """
    A sub-request was malformed and could not be transformed.

    Raised before any store is touched on the create path.

    Args:
        message (str): Human-readable reason, usually the underlying cause.
        field (str, optional): Name of the offending request field.
    """

    category = "invalid_input"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class MissingField(InvalidInput):
    """A required top-level sub-request is absent."""

    category = "missing_field"

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"No {field} provided", field=field)


class PersistenceFailure(OfferingError):
    """
    A store call failed while persisting an offering.

    The original store exception is available as ``cause`` and as
    ``__cause__`` when raised with ``raise ... from``.
    """

    category = "persistence_failure"
    status_code = 500

    def __init__(self, cause: Exception, step: Optional[str] = None):
        message = f"Failed to persist {step}: {cause}" if step else f"Failed to persist offering: {cause}"
        super().__init__(message)
        self.cause = cause
        self.step = step

    def to_response(self) -> dict:
        # store internals are not exposed to clients
        return {"error": self.category, "message": "Failed to persist offering"}


class PersistenceError(Exception):
    """Raised by store adapters when a write is rejected by the backend."""

    def __init__(self, message: str, entity_id: Optional[str] = None):
        super().__init__(message)
        self.entity_id = entity_id


class DuplicateIdError(PersistenceError):
    """An entity with the same id already exists in the store."""


class EntityNotFoundError(PersistenceError):
    """An update targeted an id that does not exist in the store."""
