"""Exceptions raised by the Cassandra session store."""


class SessionStoreError(RuntimeError):
    """Base class for session store errors."""


class ConfigurationError(SessionStoreError):
    """Raised when a required parameter is missing or malformed."""


class StorageUnavailable(SessionStoreError):
    """Could not obtain a connection to the Cassandra cluster."""


class UnknownSession(SessionStoreError):
    """No record exists for the requested session ID."""


class SessionLoadFailed(SessionStoreError):
    """Failed to read a session from the session table."""


class SessionSaveFailed(SessionStoreError):
    """Failed to write a session to the session table."""


class InvalidCookie(SessionStoreError):
    """Session cookie is malformed, expired, or was tampered with."""


class CookieEncodeFailed(SessionStoreError):
    """None of the configured codecs could sign the session cookie."""


class SessionDecodeFailed(SessionStoreError):
    """Stored session payload could not be deserialized."""


class SessionEncodeFailed(SessionStoreError):
    """Session payload could not be serialized."""
