"""
Serialization of session payloads for the session table.

Payloads are stored as UTF-8 tagged JSON, the format that Flask uses for its
cookie sessions. In addition to the JSON types, tuples, bytes, UUIDs and
:class:`markupsafe.Markup` survive a round trip. Datetimes are stored in ISO
8601 form, so microseconds and UTC offsets (or the lack of one) are kept.

Dict keys must be strings at every level; JSON would turn anything else into
a string.
"""

from typing import Any, Mapping
from datetime import datetime

from flask.json.tag import JSONTag, TaggedJSONSerializer, TagDateTime

from .exceptions import SessionDecodeFailed, SessionEncodeFailed


class TagISODateTime(JSONTag):
    """Tags datetimes with their full ISO 8601 representation."""

    __slots__ = ()
    key = ' d'

    def check(self, value: Any) -> bool:
        return isinstance(value, datetime)

    def to_json(self, value: datetime) -> str:
        return value.isoformat()

    def to_python(self, value: str) -> datetime:
        return datetime.fromisoformat(value)


class SessionSerializer(TaggedJSONSerializer):
    """Flask's tagged JSON, with lossless datetimes."""

    default_tags = [
        TagISODateTime if tag is TagDateTime else tag
        for tag in TaggedJSONSerializer.default_tags
    ]


serializer = SessionSerializer()


def _check_keys(value: Any) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise SessionEncodeFailed(
                    f'Session keys must be str, not {key!r}'
                )
            _check_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_keys(item)


def dumps(values: Mapping[str, Any]) -> bytes:
    """
    Serialize a session payload.

    Parameters
    ----------
    values : Mapping
        Session payload. Keys of this and of any nested dict must be strings.

    Returns
    -------
    bytes

    Raises
    ------
    :class:`SessionEncodeFailed`
        Raised if a key is not a string, or a value cannot be serialized.

    """
    values = dict(values)
    _check_keys(values)
    try:
        return serializer.dumps(values).encode('utf-8')
    except (TypeError, ValueError) as e:
        raise SessionEncodeFailed(f'Could not serialize session: {e}') from e


def loads(payload: bytes) -> dict:
    """
    Deserialize a session payload.

    Raises
    ------
    :class:`SessionDecodeFailed`
        Raised if the payload is corrupt or is not a mapping. Nothing is
        returned in that case, never a partial payload.

    """
    try:
        values = serializer.loads(payload.decode('utf-8'))
    except (UnicodeDecodeError, ValueError, TypeError, KeyError) as e:
        raise SessionDecodeFailed(f'Corrupt session payload: {e}') from e
    if not isinstance(values, dict):
        raise SessionDecodeFailed('Session payload is not a mapping')
    return values
