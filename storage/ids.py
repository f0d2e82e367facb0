"""
storage/ids.py

Type-prefixed opaque identifiers: ``<prefix><base-36 of a random UUID4>``.
"""

from __future__ import annotations

import string
from uuid import uuid4

_ALPHABET = string.digits + string.ascii_lowercase


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_ALPHABET[rem])
    return "".join(reversed(out))


def generate_id(prefix: str) -> str:
    """Return ``prefix`` followed by 128 random bits in base 36."""
    return prefix + _base36(uuid4().int)
