"""
Server-side sessions in Cassandra, behind a signed session cookie.

The cookie carries only an opaque, signed session ID. The session payload
lives in a Cassandra table, written with a TTL equal to the session max age,
so that Cassandra purges expired sessions on its own.

Quick start
-----------

Without Flask, use a :class:`.CassandraStore` directly with werkzeug-style
request and response objects:

.. code-block:: python

   from cassandra_sessions import CassandraStore, ClusterConfig, KeyPair

   store = CassandraStore(ClusterConfig(contact_points=['cassandra'],
                                        keyspace='app'),
                          KeyPair(hash_key, block_key))

   session = store.get(request, 'app-session')
   session['user'] = 'alice'
   store.save(response, session)

To expire a session, call :meth:`.Session.expire` (or set a negative
``session.options.max_age``) and save it. Only the cookie is removed; the
stored record stays until its TTL runs out.

With Flask, call :func:`.ext.init_app` and use :data:`flask.session`.
"""

from .domain import Options, Session
from .cookies import KeyPair
from .storage import CassandraStorage, ClusterConfig
from .store import CassandraStore
