from __future__ import annotations

import zlib
from typing import Callable, Dict, Optional

from . import config
from .models import FrameMetadata, IntegrityResult

NO_CHECKSUM = "No checksum to verify"
CHECKSUM_VERIFIED = "Checksum verified"
CHECKSUM_MISMATCH = "Checksum mismatch"


def rolling_checksum(data: bytes) -> str:
    """31-multiplier rolling hash folded to signed 32 bits, abs value as hex."""
    h = 0
    for b in data:
        h = ((h << 5) - h + b) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return format(abs(h), "x")


def crc32_checksum(data: bytes) -> str:
    return format(zlib.crc32(data) & 0xFFFFFFFF, "08x")


CHECKSUM_ALGORITHMS: Dict[str, Callable[[bytes], str]] = {
    "rolling": rolling_checksum,
    "crc32": crc32_checksum,
}


def compute_checksum(
    text: str,
    algorithm: str = config.DEFAULT_CHECKSUM,
    encoding: str = config.DEFAULT_ENCODING,
) -> str:
    try:
        func = CHECKSUM_ALGORITHMS[algorithm]
    except KeyError:
        raise ValueError(f"unknown checksum algorithm {algorithm!r}") from None
    return func(text.encode(encoding))


def verify_integrity(
    text: str,
    metadata: Optional[FrameMetadata],
    algorithm: str = config.DEFAULT_CHECKSUM,
) -> IntegrityResult:
    """
    Compare the checksum of `text` against the one carried in metadata.
    A mismatch is reported, not raised: the caller still owns the text.
    """
    if metadata is None or not metadata.checksum:
        return IntegrityResult(valid=True, reason=NO_CHECKSUM)
    actual = compute_checksum(text, algorithm)
    expected = metadata.checksum.lower()
    valid = actual == expected
    return IntegrityResult(
        valid=valid,
        reason=CHECKSUM_VERIFIED if valid else CHECKSUM_MISMATCH,
        expected=metadata.checksum,
        actual=actual,
    )
