"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so callers (the CLI, an HTTP layer) can catch them uniformly and map each
subclass to their own status codes.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested product or component relationship does not exist."""


class ConflictError(DomainException):
    """A mutation collides with history, e.g. editing an already-ordered product."""


class StateError(DomainException):
    """A lifecycle transition is not allowed from the current status."""
