"""Tests for :mod:`cassandra_sessions.serialize`."""

from unittest import TestCase
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from pytz import UTC

from .. import serialize
from ..exceptions import SessionDecodeFailed, SessionEncodeFailed

EST = timezone(timedelta(hours=-5))

scalars = (
    st.none() | st.booleans() | st.integers() | st.text() | st.binary()
    | st.floats(allow_nan=False) | st.uuids()
    | st.datetimes(min_value=datetime(1900, 1, 1),
                   timezones=st.none() | st.sampled_from([UTC, EST]))
)
values = st.recursive(
    scalars,
    lambda children: st.lists(children)
    | st.lists(children).map(tuple)
    | st.tuples(children, children)
    | st.dictionaries(st.text(), children),
    max_leaves=20
)


class TestSerialize(TestCase):
    """Session payloads are stored as tagged JSON."""

    @given(st.dictionaries(st.text(), values))
    @settings(max_examples=200)
    def test_round_trip(self, payload):
        """Whatever is dumped is loaded back unchanged."""
        self.assertEqual(serialize.loads(serialize.dumps(payload)), payload)

    def test_rich_types(self):
        """Tuples, datetimes and UUIDs survive."""
        payload = {
            'pair': (1, 'two'),
            'when': datetime(2019, 3, 4, 5, 6, 7, tzinfo=UTC),
            'uuid': uuid4()
        }
        self.assertEqual(serialize.loads(serialize.dumps(payload)), payload)

    def test_datetime_precision(self):
        """Microseconds, offsets, and naivety are kept."""
        naive = datetime(2019, 3, 4, 5, 6, 7, 123456)
        eastern = datetime(2019, 3, 4, 5, 6, 7, 654321, tzinfo=EST)
        loaded = serialize.loads(serialize.dumps({'naive': naive,
                                                  'eastern': eastern}))
        self.assertEqual(loaded['naive'], naive)
        self.assertIsNone(loaded['naive'].tzinfo)
        self.assertEqual(loaded['eastern'], eastern)
        self.assertEqual(loaded['eastern'].utcoffset(), timedelta(hours=-5))
        self.assertEqual(loaded['eastern'].microsecond, 654321)

    def test_non_string_key(self):
        """Top-level keys must be strings."""
        with self.assertRaises(SessionEncodeFailed):
            serialize.dumps({1: 'one'})

    def test_nested_non_string_key(self):
        """Keys of nested dicts must be strings too."""
        for payload in ({'counts': {1: 'one'}},
                        {'items': [{'ok': {None: 1}}]},
                        {'pair': ('a', {(1, 2): 'b'})}):
            with self.assertRaises(SessionEncodeFailed):
                serialize.dumps(payload)

    @given(st.dictionaries(st.text(),
                           st.dictionaries(st.integers(), values,
                                           min_size=1),
                           min_size=1))
    @settings(max_examples=50,
              suppress_health_check=[HealthCheck.too_slow])
    def test_nested_non_string_keys_rejected(self, payload):
        """Payloads that JSON would change are never written."""
        with self.assertRaises(SessionEncodeFailed):
            serialize.dumps(payload)

    def test_unsupported_value(self):
        """Values that cannot be serialized are rejected."""
        with self.assertRaises(SessionEncodeFailed):
            serialize.dumps({'foo': object()})

    def test_corrupt(self):
        """Corrupt payloads are rejected outright."""
        for payload in (b'', b'{"user": "alice"', b'\xff\xfe',
                        b'{"id": {" u": "nope"}}'):
            with self.assertRaises(SessionDecodeFailed):
                serialize.loads(payload)

    def test_not_a_mapping(self):
        """A payload that is not a mapping is rejected."""
        with self.assertRaises(SessionDecodeFailed):
            serialize.loads(b'["user", "alice"]')
