"""Flask configuration for the example session application."""

import os

SESSION_COOKIE_NAME = os.environ.get('SESSION_COOKIE_NAME', 'session')

SESSION_KEYS = os.environ.get('SESSION_KEYS')
"""Cookie key pairs, newest first: ``hash[:block],hash[:block]``."""

SESSION_TABLE = os.environ.get('SESSION_TABLE', 'sessions')
SESSION_MAX_AGE = os.environ.get('SESSION_MAX_AGE', '2592000')

CASSANDRA_CONTACT_POINTS = os.environ.get('CASSANDRA_CONTACT_POINTS',
                                          'localhost')
CASSANDRA_PORT = os.environ.get('CASSANDRA_PORT', '9042')
CASSANDRA_KEYSPACE = os.environ.get('CASSANDRA_KEYSPACE', 'sessions')
CASSANDRA_USERNAME = os.environ.get('CASSANDRA_USERNAME')
CASSANDRA_PASSWORD = os.environ.get('CASSANDRA_PASSWORD')

LOGLEVEL = int(os.environ.get('LOGLEVEL', '20'))
