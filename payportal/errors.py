"""
Error taxonomy shared by the currency converter and the client core.
Server routes answer with HTTP status codes; the client maps those codes
back onto these classes.
"""


class PortalError(Exception):
    """Base class for every failure surfaced to a portal caller."""

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class ValidationError(PortalError):
    """Missing or malformed input, caught before any network call."""

    def __init__(self, message=None, fields=None):
        super().__init__(message)
        self.fields = list(fields or [])


class UnsupportedCurrency(ValidationError):
    pass


class InvalidAmount(ValidationError):
    pass


class ActionInFlight(PortalError):
    """The same action on the same target is already running."""


class Forbidden(PortalError):
    pass


class Unauthorized(PortalError):
    """Token missing, expired or revoked. The session has been cleared."""


class NotFound(PortalError):
    pass


class Conflict(PortalError):
    """The target is no longer in the state the operation expected."""


class NetworkFailure(PortalError):
    pass


class Timeout(NetworkFailure):
    pass


class ServerError(PortalError):
    pass


class SubmissionFailed(PortalError):
    """A payment submission did not create a transaction."""
