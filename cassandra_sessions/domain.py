"""Core concepts for server-side sessions."""

from typing import Any, Mapping, Optional
from dataclasses import dataclass, replace

from flask.sessions import SessionMixin
from werkzeug.datastructures import CallbackDict

DEFAULT_PATH = '/'
DEFAULT_MAX_AGE = 2592000
"""Thirty days, in seconds."""


@dataclass
class Options:
    """Cookie attributes and storage TTL for a session."""

    path: str = DEFAULT_PATH
    max_age: int = DEFAULT_MAX_AGE
    """
    Lifetime of the cookie and of the stored record, in seconds.

    Zero means a browser-session cookie and a record without TTL. A negative
    value expires the cookie on the next save.
    """

    domain: Optional[str] = None
    secure: bool = False
    http_only: bool = True
    same_site: Optional[str] = None

    def copy(self) -> 'Options':
        """Get an independent copy of these options."""
        return replace(self)


class Session(CallbackDict, SessionMixin):
    """
    A server-side session, keyed by an opaque ID carried in a cookie.

    The session is itself the payload: a mapping of string keys to
    serializable values. Any mutation of the payload sets :attr:`modified`.
    """

    modified = False
    accessed = False

    def __init__(self, name: str, options: Options,
                 initial: Optional[Mapping[str, Any]] = None,
                 session_id: str = '') -> None:
        """Create an empty (or pre-populated) session called ``name``."""
        def on_update(self: Session) -> None:
            self.modified = True
            self.accessed = True

        super().__init__(initial, on_update)
        self.name = name
        self.options = options
        self.session_id = session_id
        self.new = True
        self.load_error: Optional[Exception] = None

    def __repr__(self) -> str:
        return (f'<{type(self).__name__} {self.name}:{self.session_id!r}'
                f' {dict.__repr__(self)}>')

    def expire(self) -> None:
        """Mark the session cookie for deletion on the next save."""
        self.options.max_age = -1
