"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Input has the wrong shape or is out of range."""


class NotFoundError(DomainException):
    """A referenced user, product, cart item or order does not exist."""


class EmptyCartError(DomainException):
    """Order conversion was attempted on a cart with no items."""


class AuthorizationError(DomainException):
    """The caller is not allowed to touch the requested resource."""


class SequenceExhaustedError(DomainException):
    """No unique order number could be allocated."""


class DuplicateOrderNumberError(DomainException):
    """An order with the same order number is already persisted."""


class ConcurrentModificationError(DomainException):
    """The stored aggregate changed since it was loaded; reload and retry."""
