"""Hashing utilities."""

import hashlib
from collections.abc import Iterable
from typing import Union


def content_hash(content: Union[str, bytes]) -> str:
    """Generate a SHA-256 hash of content.

    Args:
        content: String or bytes to hash

    Returns:
        Hex-encoded hash string
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def block_ids_hash(block_ids: Iterable[str], length: int = 12) -> str:
    """Hash an ordered sequence of block IDs into a short stable key."""
    return content_hash("\n".join(block_ids))[:length]
