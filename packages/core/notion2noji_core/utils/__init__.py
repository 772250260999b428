"""Utility functions."""

from notion2noji_core.utils.hashing import block_ids_hash, content_hash
from notion2noji_core.utils.logging import get_logger, log_exceptions
from notion2noji_core.utils.retry import RateLimitError, with_retry

__all__ = [
    "block_ids_hash",
    "content_hash",
    "get_logger",
    "log_exceptions",
    "RateLimitError",
    "with_retry",
]
