from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable machine-readable ``code`` and an HTTP
    ``status_code`` so the web layer can translate it 1:1.
    """

    code = "E_UNKNOWN_INTERNAL"
    message = "Caught unexpected internal server error"
    status_code = 500

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(DomainError):
    """Raised when input data is missing or invalid."""

    code = "E_INVALID_INPUT"
    message = "Invalid or missing input"
    status_code = 400


class ZeroPatronCount(ValidationError):
    code = "E_ZERO_PATRON_COUNT"
    message = "At least one patron must be checked in"


class RecaptchaFailure(ValidationError):
    code = "E_RECAPTCHA_FAIL"
    message = "Request did not pass recaptcha confidence threshold"


class AuthenticationError(DomainError):
    """Raised when the caller's identity cannot be established."""

    status_code = 401


class BadLogin(AuthenticationError):
    code = "E_BAD_LOGIN"
    message = "Bad login"


class Unauthenticated(AuthenticationError):
    code = "E_UNAUTHENTICATED"
    message = "Authentication is required"


class SessionExpired(AuthenticationError):
    code = "E_SESSION_EXPIRED"
    message = "Session has expired"


class AuthorizationError(DomainError):
    """Raised when an authenticated manager lacks permission for an action."""

    status_code = 403


class NoAccess(AuthorizationError):
    code = "E_NO_ACCESS"
    message = "You are not authorized to perform actions against the requested resource"


class NotFoundError(DomainError):
    """Raised when a referenced resource does not exist."""

    status_code = 404


class ManagerNotFound(NotFoundError):
    code = "E_MANAGER_NOT_FOUND"
    message = "Manager not found"


class VenueNotFound(NotFoundError):
    code = "E_VENUE_NOT_FOUND"
    message = "Venue not found"


class AreaNotFound(NotFoundError):
    code = "E_AREA_NOT_FOUND"
    message = "Requested venue area was not found"


class ServiceNotFound(NotFoundError):
    code = "E_SERVICE_NOT_FOUND"
    message = "No matching service was found"


class AreaHasNoService(ServiceNotFound):
    """The area exists but is not running a service that could take check-ins."""

    code = "E_NO_SERVICE"
    message = "Area has no active service"


class TableNotFound(NotFoundError):
    code = "E_TABLE_NOT_FOUND"
    message = "No matching table was found"


class CheckInNotFound(NotFoundError):
    code = "E_CHECKIN_NOT_FOUND"
    message = "No matching check-in was found"


class PatronNotFound(NotFoundError):
    code = "E_PATRON_NOT_FOUND"
    message = "No matching patron was found"


class UnsubscribeLinkNotFound(NotFoundError):
    code = "E_UNSUBSCRIBE_LINK_NOT_FOUND"
    message = "Unsubscribe link was not found"


class ConflictError(DomainError):
    """Raised when the current state of an area or service forbids the action."""

    status_code = 409


class AreaHasActiveService(ConflictError):
    code = "E_AREA_HAS_ACTIVE_SERVICE"
    message = "Area already has an active service"


class AreaHasNoActiveService(ConflictError):
    code = "E_AREA_HAS_NO_ACTIVE_SERVICE"
    message = "Area does not have an active service"


class ServiceIsNotActive(ConflictError):
    code = "E_SERVICE_IS_NOT_ACTIVE"
    message = "Service is not active"


class AreaIsClosed(ConflictError):
    code = "E_AREA_IS_CLOSED"
    message = "Area is not accepting check-ins"


class MarketingUserAlreadySubscribed(ConflictError):
    code = "E_MARKETING_USER_SUBSCRIBED"
    message = "Email address is already subscribed"
