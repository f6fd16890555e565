"""
Flask integration.

.. code-block:: python

   from flask import Flask
   from cassandra_sessions import ext

   app = Flask('someapp')
   app.config['SESSION_KEYS'] = 'a-long-random-hash-key:a-block-key'
   ext.init_app(app)

   # flask.session is now a Cassandra-backed session.

"""

from typing import Any, Optional
import logging

from flask import Flask, Request, Response
from flask.sessions import SessionInterface

from .context import get_application_config, get_application_global
from .cookies import parse_key_pairs
from .domain import Session
from .exceptions import ConfigurationError, SessionStoreError
from .storage import ClusterConfig
from .store import CassandraStore

logger = logging.getLogger(__name__)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() in ('1', 'true', 'yes')
    return bool(value)


def init_app(app: Flask) -> None:
    """Set configuration defaults and install the session interface."""
    app.config.setdefault('CASSANDRA_CONTACT_POINTS', 'localhost')
    app.config.setdefault('CASSANDRA_PORT', '9042')
    app.config.setdefault('CASSANDRA_KEYSPACE', 'sessions')
    app.config.setdefault('CASSANDRA_USERNAME', None)
    app.config.setdefault('CASSANDRA_PASSWORD', None)
    app.config.setdefault('CASSANDRA_PROTOCOL_VERSION', None)
    app.config.setdefault('SESSION_TABLE', 'sessions')
    app.config.setdefault('SESSION_MAX_AGE', '2592000')
    app.config.setdefault('SESSION_COOKIE_PATH', '/')
    app.session_interface = CassandraSessionInterface()


def get_store(app: Optional[Flask] = None) -> CassandraStore:
    """Get a new :class:`.CassandraStore` configured for ``app``."""
    config = get_application_config(app)
    keys = config.get('SESSION_KEYS')
    if not keys:
        raise ConfigurationError('Missing required config parameter'
                                 ' SESSION_KEYS')
    if isinstance(keys, str):
        keys = parse_key_pairs(keys)

    contact_points = config.get('CASSANDRA_CONTACT_POINTS', 'localhost')
    if isinstance(contact_points, str):
        contact_points = [p.strip() for p in contact_points.split(',')]
    protocol_version = config.get('CASSANDRA_PROTOCOL_VERSION')
    cluster = ClusterConfig(
        contact_points=contact_points,
        port=int(config.get('CASSANDRA_PORT', '9042')),
        keyspace=config.get('CASSANDRA_KEYSPACE', 'sessions'),
        username=config.get('CASSANDRA_USERNAME'),
        password=config.get('CASSANDRA_PASSWORD'),
        protocol_version=int(protocol_version) if protocol_version else None
    )
    store = CassandraStore(cluster, *keys,
                           table_name=config.get('SESSION_TABLE', 'sessions'))
    store.set_max_age(int(config.get('SESSION_MAX_AGE', '2592000')))
    store.options.path = config.get('SESSION_COOKIE_PATH') or '/'
    store.options.domain = config.get('SESSION_COOKIE_DOMAIN') or None
    store.options.secure = \
        _as_bool(config.get('SESSION_COOKIE_SECURE', False))
    store.options.http_only = \
        _as_bool(config.get('SESSION_COOKIE_HTTPONLY', True))
    store.options.same_site = config.get('SESSION_COOKIE_SAMESITE')
    return store


def current_store() -> CassandraStore:
    """Get/create the :class:`.CassandraStore` for this context."""
    g = get_application_global()
    if not g:
        return get_store()
    if 'cassandra_store' not in g:
        g.cassandra_store = get_store()
    return g.cassandra_store      # type: ignore


class CassandraSessionInterface(SessionInterface):
    """
    Makes :data:`flask.session` a Cassandra-backed :class:`.Session`.

    A session is saved at the end of the request if it was modified or
    expired. If the save fails, the failure is logged and the response goes
    out without a session cookie.
    """

    def __init__(self, store: Optional[CassandraStore] = None) -> None:
        """Use ``store``, or build one from the app config on first use."""
        self.store = store

    def _get_store(self) -> CassandraStore:
        if self.store is None:
            return current_store()
        return self.store

    def open_session(self, app: Flask, request: Request) -> Session:
        """Get the session for ``request``, creating one if necessary."""
        return self._get_store().get(request, self.get_cookie_name(app))

    def save_session(self, app: Flask, session: Any,
                     response: Response) -> None:
        """Persist the session and set the cookie, if needed."""
        if not isinstance(session, Session):
            return
        if not session.modified and session.options.max_age >= 0:
            return
        try:
            self._get_store().save(response, session)
        except SessionStoreError as e:
            logger.error('Failed to save session %s: %s', session.name, e)
