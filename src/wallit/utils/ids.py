"""Identifier generation."""

import secrets
import string

ID_ALPHABET = string.digits + string.ascii_lowercase
ID_LENGTH = 21


def generate_id() -> str:
    """Return a random, URL-safe, 21-character identifier."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))
