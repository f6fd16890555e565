"""Session identifier generation."""

import secrets
from base64 import b32encode

ID_LENGTH = 32
"""Number of random bytes behind each session ID."""


def generate_id(length: int = ID_LENGTH) -> str:
    """Generate a random, URL-safe session ID (base-32, padding stripped)."""
    return b32encode(secrets.token_bytes(length)).decode('ascii').rstrip('=')
