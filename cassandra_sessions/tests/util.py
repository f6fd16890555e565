"""Testing helpers."""

from typing import Dict, List, Optional, Tuple

from werkzeug.wrappers import Request, Response

from ..exceptions import UnknownSession

HASH_KEY = 'foo-hash-key-that-is-at-least-32-bytes-long'
BLOCK_KEY = 'foo-block-key'


class InMemoryStorage(object):
    """Holds serialized sessions in a dict, and records every write."""

    def __init__(self) -> None:
        self.rows: Dict[str, bytes] = {}
        self.ttls: Dict[str, int] = {}
        self.puts: List[Tuple[str, bytes, int]] = []

    def get(self, session_id: str) -> bytes:
        try:
            return self.rows[session_id]
        except KeyError as e:
            raise UnknownSession(f'Failed to find session {session_id}') \
                from e

    def put(self, session_id: str, payload: bytes, ttl: int) -> None:
        self.puts.append((session_id, payload, ttl))
        self.rows[session_id] = payload
        self.ttls[session_id] = ttl


def make_request(cookies: Optional[Dict[str, str]] = None) -> Request:
    """Build a request that carries ``cookies``."""
    headers = {}
    if cookies:
        headers['Cookie'] = '; '.join(f'{k}={v}' for k, v in cookies.items())
    return Request.from_values(headers=headers)


def set_cookies(response: Response) -> List[str]:
    """Get the raw ``Set-Cookie`` headers on ``response``."""
    return response.headers.getlist('Set-Cookie')


def cookie_value(header: str) -> str:
    """Get the value from a raw ``Set-Cookie`` header."""
    return header.split(';', 1)[0].split('=', 1)[1]
