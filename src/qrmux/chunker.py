from __future__ import annotations

import logging
from typing import Any, Iterator, List

from . import config

log = logging.getLogger(__name__)


def resolve_chunk_size(value: Any) -> int:
    """Return `value` if it is a usable chunk size, else DEFAULT_CHUNK_SIZE."""
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    log.warning(
        "invalid chunk size %r, falling back to %d", value, config.DEFAULT_CHUNK_SIZE
    )
    return config.DEFAULT_CHUNK_SIZE


def iter_chunks(text: str, chunk_size: int) -> Iterator[str]:
    for start in range(0, len(text), chunk_size):
        yield text[start : start + chunk_size]


def chunk_text(text: str, max_chunk_size: Any = config.DEFAULT_CHUNK_SIZE) -> List[str]:
    """
    Split text into ordered, non-overlapping slices of at most `max_chunk_size`
    characters. Empty text yields a single empty chunk so that every
    transmission has at least one frame.
    """
    size = resolve_chunk_size(max_chunk_size)
    if not text:
        return [""]
    return list(iter_chunks(text, size))
