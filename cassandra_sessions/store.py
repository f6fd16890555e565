"""
The session manager.

:class:`CassandraStore` ties together the cookie codecs, the payload
serializer and the session table. Per request, it finds or creates a
:class:`.Session` (:meth:`CassandraStore.get`), and persists it on the
response (:meth:`CassandraStore.save`).
"""

from typing import Any, Dict, Optional, Protocol, Union, Sequence
from datetime import datetime
import logging

from pytz import UTC

from . import cookies, ids, serialize
from .cookies import KeyPair, Key
from .domain import Options, Session
from .exceptions import InvalidCookie, SessionStoreError, UnknownSession
from .storage import CassandraStorage, ClusterConfig, DEFAULT_TABLE

logger = logging.getLogger(__name__)

REGISTRY_KEY = 'cassandra_sessions.registry'
EXPIRED = datetime.fromtimestamp(1, tz=UTC)


class Storage(Protocol):
    """Anything that can hold serialized sessions, with a TTL."""

    def get(self, session_id: str) -> bytes:
        """Get a payload, or raise :class:`.UnknownSession`."""
        ...

    def put(self, session_id: str, payload: bytes, ttl: int) -> None:
        """Insert or replace a payload."""
        ...


class CassandraStore(object):
    """
    Stores sessions in a Cassandra table.

    Only the cookie path and max age are set by default: ``/`` and 30 days.
    The connection to the database is not checked on creation.

    .. code-block:: python

       store = CassandraStore(ClusterConfig(keyspace='app'),
                              KeyPair('new-hash-key', 'new-block-key'),
                              KeyPair('old-hash-key', 'old-block-key'))
       session = store.get(request, 'my-session')
       session['user'] = 'alice'
       store.save(response, session)

    """

    def __init__(self, config: ClusterConfig,
                 *key_pairs: Union[KeyPair, Sequence[Key], Key],
                 table_name: str = '',
                 storage: Optional[Storage] = None) -> None:
        """
        Configure the store.

        Parameters
        ----------
        config : :class:`.ClusterConfig`
            Passed through to :class:`.CassandraStorage`.
        key_pairs : :class:`.KeyPair`
            Cookie keys, newest first. Older pairs are only used to decode
            cookies issued before a rotation.
        table_name : str
            Defaults to ``sessions``.
        storage : :class:`Storage`
            Overrides the Cassandra backend.

        """
        self.table_name = table_name or DEFAULT_TABLE
        self.options = Options()
        self.codecs = cookies.codecs_from_pairs(*key_pairs,
                                                max_age=self.options.max_age)
        if storage is None:
            storage = CassandraStorage(config, self.table_name)
        self.storage = storage

    def set_max_age(self, max_age: int) -> None:
        """Set the default max age of new sessions and of cookie signatures."""
        self.options.max_age = max_age
        cookies.set_max_age(self.codecs, max_age)

    def get(self, request: Any, name: str) -> Session:
        """
        Get the session called ``name`` for the current request.

        The session is created (and loaded) once per request; subsequent
        calls return the same object.
        """
        registry: Dict[str, Session] = \
            request.environ.setdefault(REGISTRY_KEY, {})
        if name not in registry:
            registry[name] = self.new(request, name)
        return registry[name]

    def new(self, request: Any, name: str) -> Session:
        """
        Create a session, loading its payload if the request has a cookie.

        Never raises on a bad cookie or a failed load: the caller gets an
        empty session instead. :attr:`.Session.new` is ``True`` unless the
        cookie verified and the lookup did not come back "not found";
        in particular, a session whose load failed for any other reason is
        not new. That error is kept on :attr:`.Session.load_error`.
        """
        session = Session(name, self.options.copy())
        cookie = request.cookies.get(name)
        if not cookie:
            return session
        try:
            session.session_id = cookies.decode_multi(name, cookie,
                                                      self.codecs)
        except InvalidCookie as e:
            logger.debug('Ignoring session cookie %s: %s', name, e)
            return session

        try:
            self._load(session)
        except UnknownSession as e:
            logger.debug('No stored session: %s', e)
        except SessionStoreError as e:
            session.load_error = e
            session.new = False
        else:
            session.new = False
        return session

    def save(self, response: Any, session: Session) -> None:
        """
        Persist ``session`` and set its cookie on ``response``.

        If the session max age is negative, the cookie is expired and nothing
        is written. The stored record is left for Cassandra to purge when its
        TTL runs out.

        Raises
        ------
        :class:`.SessionStoreError`
            Raised if the payload could not be serialized or stored, or the
            cookie could not be signed. No cookie is set in that case.

        """
        options = session.options
        if options.max_age < 0:
            self._set_cookie(response, session.name, '', options,
                             max_age=0, expires=EXPIRED)
            return

        session_id = session.session_id or ids.generate_id()
        self._save(session_id, session)
        session.session_id = session_id

        value = cookies.encode_multi(session.name, session.session_id,
                                     self.codecs)
        self._set_cookie(response, session.name, value, options,
                         max_age=options.max_age or None)
        session.modified = False

    def save_all(self, request: Any, response: Any) -> None:
        """Save every session that was obtained via :meth:`get`."""
        for session in request.environ.get(REGISTRY_KEY, {}).values():
            self.save(response, session)

    def _load(self, session: Session) -> None:
        values = serialize.loads(self.storage.get(session.session_id))
        session.update(values)
        session.modified = False

    def _save(self, session_id: str, session: Session) -> None:
        payload = serialize.dumps(session)
        self.storage.put(session_id, payload, session.options.max_age)

    def _set_cookie(self, response: Any, name: str, value: str,
                    options: Options, max_age: Optional[int] = None,
                    expires: Optional[datetime] = None) -> None:
        response.set_cookie(name, value, max_age=max_age, expires=expires,
                            path=options.path, domain=options.domain,
                            secure=options.secure, httponly=options.http_only,
                            samesite=options.same_site)
