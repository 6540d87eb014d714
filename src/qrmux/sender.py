from __future__ import annotations

import time
from typing import Any, List, Optional

from . import config
from .chunker import chunk_text
from .frames import encode_frame
from .integrity import compute_checksum
from .models import FrameMetadata


def build_metadata(
    text: str,
    total_chunks: int,
    timestamp: Optional[int] = None,
    algorithm: str = config.DEFAULT_CHECKSUM,
) -> FrameMetadata:
    return FrameMetadata(
        total_chunks=total_chunks,
        timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
        checksum=compute_checksum(text, algorithm),
        encoding=config.DEFAULT_ENCODING,
    )


def generate_frames(
    text: str,
    max_chunk_size: Any = config.DEFAULT_CHUNK_SIZE,
    timestamp: Optional[int] = None,
    algorithm: str = config.DEFAULT_CHECKSUM,
) -> List[str]:
    """Return the ordered wire strings for `text`, one per QR code."""
    chunks = chunk_text(text, max_chunk_size)
    meta = build_metadata(text, len(chunks), timestamp=timestamp, algorithm=algorithm)
    return [encode_frame(chunk, idx, len(chunks), meta) for idx, chunk in enumerate(chunks)]


def progress_label(current: int, total: int) -> str:
    pct = 0 if total <= 0 else round(current / total * 100)
    return f"frame {current} / {total} ({pct}%)"
