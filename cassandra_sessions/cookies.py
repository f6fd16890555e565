"""
Signing and verification of session cookies.

A session cookie carries nothing but the session ID. Each
:class:`CookieCodec` packs the ID into a JSON web token signed with its hash
key, with the session name as the audience. When the codec also has a block
key, the token is encrypted with Fernet so that the ID is opaque to the
client.

Keys are rotated by prepending a new :class:`KeyPair`: cookies are always
encoded with the first codec that succeeds, and decoded with the first codec
that verifies them.
"""

from typing import List, NamedTuple, Optional, Sequence, Union
from datetime import datetime, timedelta
from base64 import urlsafe_b64encode
import hashlib
import logging

import jwt
from cryptography.fernet import Fernet, InvalidToken as InvalidCiphertext
from pytz import UTC

from .domain import DEFAULT_MAX_AGE
from .exceptions import ConfigurationError, CookieEncodeFailed, InvalidCookie

logger = logging.getLogger(__name__)

ALGORITHM = 'HS256'

Key = Union[str, bytes]


class KeyPair(NamedTuple):
    """Secret keys for one generation of session cookies."""

    hash_key: Key
    """Signs the cookie."""

    block_key: Optional[Key] = None
    """Encrypts the cookie, if set."""


def _as_bytes(key: Key) -> bytes:
    return key.encode('utf-8') if isinstance(key, str) else key


class CookieCodec(object):
    """Encodes and decodes session IDs using a single :class:`KeyPair`."""

    def __init__(self, hash_key: Key, block_key: Optional[Key] = None,
                 max_age: int = DEFAULT_MAX_AGE) -> None:
        """Set up signing (and optionally encryption) for cookie values."""
        if not hash_key:
            raise ConfigurationError('Hash key is required')
        self._hash_key = _as_bytes(hash_key)
        self._fernet: Optional[Fernet] = None
        if block_key:
            digest = hashlib.sha256(_as_bytes(block_key)).digest()
            self._fernet = Fernet(urlsafe_b64encode(digest))
        self.max_age = max_age

    def encode(self, name: str, value: str) -> str:
        """
        Produce an authenticated cookie value for a session ID.

        Parameters
        ----------
        name : str
            Session (cookie) name. Bound into the signature.
        value : str
            Session ID.

        Returns
        -------
        str

        Raises
        ------
        :class:`CookieEncodeFailed`

        """
        now = datetime.now(tz=UTC)
        claims = {'aud': name, 'sid': value, 'iat': now}
        if self.max_age > 0:
            claims['exp'] = now + timedelta(seconds=self.max_age)
        try:
            token: str = jwt.encode(claims, self._hash_key,
                                    algorithm=ALGORITHM)
        except (jwt.exceptions.PyJWTError, TypeError, ValueError) as e:
            raise CookieEncodeFailed(f'Could not sign cookie: {e}') from e
        if self._fernet is not None:
            token = self._fernet.encrypt(token.encode('ascii')).decode('ascii')
        return token

    def decode(self, name: str, cookie: str) -> str:
        """
        Verify a cookie value and get the session ID that it carries.

        Raises
        ------
        :class:`InvalidCookie`
            Raised if the value is malformed, the signature (or ciphertext)
            does not verify, the cookie has expired, or it was issued for a
            different session name.

        """
        try:
            token = cookie.encode('ascii')
            if self._fernet is not None:
                token = self._fernet.decrypt(token)
            claims = jwt.decode(token, self._hash_key, algorithms=[ALGORITHM],
                                audience=name)
            session_id = claims['sid']
        except (UnicodeEncodeError, InvalidCiphertext, KeyError,
                jwt.exceptions.InvalidTokenError) as e:
            raise InvalidCookie(f'Session cookie is not valid: {e}') from e
        if not isinstance(session_id, str) or not session_id:
            raise InvalidCookie('Session cookie does not carry an ID')
        return session_id


def codecs_from_pairs(*pairs: Union[KeyPair, Sequence[Key], Key],
                      max_age: int = DEFAULT_MAX_AGE) -> List[CookieCodec]:
    """
    Build one :class:`CookieCodec` per key pair, in order.

    A pair may be a :class:`KeyPair`, a ``(hash_key, block_key)`` sequence,
    or a bare hash key.
    """
    codecs = []
    for pair in pairs:
        if isinstance(pair, (str, bytes)):
            pair = KeyPair(pair)
        codecs.append(CookieCodec(*pair, max_age=max_age))
    return codecs


def parse_key_pairs(value: str) -> List[KeyPair]:
    """
    Parse key pairs from a config string.

    Pairs are separated by commas, and hash and block keys by a colon, e.g.
    ``"newhash:newblock,oldhash:oldblock"``.
    """
    pairs = []
    for item in value.split(','):
        item = item.strip()
        if not item:
            continue
        hash_key, _, block_key = item.partition(':')
        pairs.append(KeyPair(hash_key, block_key or None))
    return pairs


def set_max_age(codecs: Sequence[CookieCodec], max_age: int) -> None:
    """Update the freshness window of each codec."""
    for codec in codecs:
        codec.max_age = max_age


def encode_multi(name: str, value: str,
                 codecs: Sequence[CookieCodec]) -> str:
    """Encode ``value`` with the first codec that succeeds."""
    if not codecs:
        raise ConfigurationError('No cookie codecs configured')
    errors = []
    for codec in codecs:
        try:
            return codec.encode(name, value)
        except CookieEncodeFailed as e:
            errors.append(e)
    raise CookieEncodeFailed('; '.join(str(e) for e in errors)) from errors[-1]


def decode_multi(name: str, cookie: str,
                 codecs: Sequence[CookieCodec]) -> str:
    """Decode ``cookie`` with the first codec that verifies it."""
    if not codecs:
        raise ConfigurationError('No cookie codecs configured')
    for codec in codecs:
        try:
            return codec.decode(name, cookie)
        except InvalidCookie as e:
            logger.debug('Codec rejected cookie %s: %s', name, e)
    raise InvalidCookie(f'No codec could verify cookie {name}')
