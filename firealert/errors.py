# firealert/errors.py


class FireAlertError(Exception):
    """Base class for errors raised by the fire alert service."""


class ConfigurationError(FireAlertError):
    """Required configuration is missing (e.g. MONGODB_URI)."""


class StoreConnectionError(FireAlertError):
    """MongoDB could not be reached at startup."""


class AuthorizationError(FireAlertError):
    """Missing or wrong bearer token on a protected route."""


class StoreError(FireAlertError):
    """A read or write against the event collection failed."""


class NotificationError(FireAlertError):
    """The outbound messaging API call failed."""
