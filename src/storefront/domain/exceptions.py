"""Domain-level exceptions.

All failures the storefront core can surface are subclasses of
DomainException so the CLI layer can catch them uniformly and display
user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated locally."""


class EmptyCode(ValidationError):
    """A discount code was blank after trimming."""

    def __init__(self) -> None:
        super().__init__("Please enter a discount code")


class DiscountAlreadyApplied(ValidationError):
    """A second code was entered while one is still applied."""


class Unauthenticated(DomainException):
    """No session exists for the acting user."""

    def __init__(self, message: str = "You need to sign in first") -> None:
        super().__init__(message)


class LoadFailed(DomainException):
    """The cart or the catalog could not be fetched."""


class RemoteUnavailable(DomainException):
    """A remote service could not be reached or answered garbage."""


class RemoteRejection(DomainException):
    """A remote service understood the request and refused it."""


class DiscountRejected(RemoteRejection):
    """The discount authority refused the code."""


class CheckoutFailed(DomainException):
    """The order was not created; nothing downstream ran."""
