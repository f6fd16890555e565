"""
Storage of serialized sessions in Cassandra.

Sessions live in a single table:

.. code-block:: sql

   CREATE TABLE sessions (id text PRIMARY KEY, "values" blob);

Records are written with a TTL, and Cassandra purges them once it elapses.
Each operation opens its own connection to the cluster and shuts it down
before returning, whether or not the operation succeeded.
"""

from typing import Any, Dict, Generator, NamedTuple, Optional, Sequence
from contextlib import contextmanager
import logging
import re

from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster, NoHostAvailable, Session as CQLSession

from .exceptions import ConfigurationError, StorageUnavailable, \
    UnknownSession, SessionLoadFailed, SessionSaveFailed

logger = logging.getLogger(__name__)

DEFAULT_TABLE = 'sessions'
TABLE_NAME = re.compile(r'^([A-Za-z][A-Za-z0-9_]*\.)?[A-Za-z][A-Za-z0-9_]*$')


class ClusterConfig(NamedTuple):
    """Connection parameters for the Cassandra cluster."""

    contact_points: Sequence[str] = ('127.0.0.1',)
    port: int = 9042
    keyspace: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    protocol_version: Optional[int] = None
    connect_timeout: float = 5.0

    def create_cluster(self) -> Cluster:
        """Get a new (unconnected) :class:`Cluster`."""
        params: Dict[str, Any] = {
            'contact_points': list(self.contact_points),
            'port': self.port,
            'connect_timeout': self.connect_timeout
        }
        if self.username is not None:
            params['auth_provider'] = PlainTextAuthProvider(
                username=self.username,
                password=self.password
            )
        if self.protocol_version is not None:
            params['protocol_version'] = self.protocol_version
        return Cluster(**params)


class CassandraStorage(object):
    """Reads and writes serialized sessions in a Cassandra table."""

    def __init__(self, config: ClusterConfig,
                 table_name: str = DEFAULT_TABLE) -> None:
        """Set the cluster and table to use; does not connect."""
        table_name = table_name or DEFAULT_TABLE
        if not TABLE_NAME.match(table_name):
            raise ConfigurationError(f'Invalid table name: {table_name}')
        self.config = config
        self.table_name = table_name

    @contextmanager
    def connect(self) -> Generator[CQLSession, None, None]:
        """Context manager for a connection to the cluster."""
        logger.debug('New Cassandra connection at %s, port %s',
                     self.config.contact_points, self.config.port)
        cluster = self.config.create_cluster()
        try:
            try:
                db = cluster.connect(self.config.keyspace)
            except NoHostAvailable as e:
                raise StorageUnavailable(f'Connection failed: {e}') from e
            yield db
        finally:
            cluster.shutdown()

    def get(self, session_id: str) -> bytes:
        """
        Get the serialized payload of a session.

        Parameters
        ----------
        session_id : str

        Returns
        -------
        bytes

        Raises
        ------
        :class:`UnknownSession`
            Raised if there is no (unexpired) record for ``session_id``.
        :class:`StorageUnavailable`
        :class:`SessionLoadFailed`

        """
        query = f'SELECT "values" FROM {self.table_name} WHERE id = %s'
        try:
            with self.connect() as db:
                row = db.execute(query, (session_id,)).one()
        except StorageUnavailable:
            raise
        except Exception as e:
            raise SessionLoadFailed(f'Failed to load: {e}') from e
        if row is None:
            raise UnknownSession(f'Failed to find session {session_id}')
        return bytes(row[0] or b'')

    def put(self, session_id: str, payload: bytes, ttl: int) -> None:
        """
        Insert or replace the payload of a session.

        Parameters
        ----------
        session_id : str
        payload : bytes
        ttl : int
            Seconds until Cassandra expires the record. Zero means never.

        Raises
        ------
        :class:`StorageUnavailable`
        :class:`SessionSaveFailed`

        """
        query = (f'INSERT INTO {self.table_name} (id, "values")'
                 ' VALUES (%s, %s) USING TTL %s')
        try:
            with self.connect() as db:
                db.execute(query, (session_id, payload, ttl))
        except StorageUnavailable:
            raise
        except Exception as e:
            raise SessionSaveFailed(f'Failed to save: {e}') from e
