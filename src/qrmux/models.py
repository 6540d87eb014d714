from __future__ import annotations

import dataclasses
import math
from typing import Any, Dict, List, Optional, Sequence

from . import config


class ProtocolError(Exception):
    """
    Base for every protocol failure.
    Core functions return these as values instead of raising them; callers
    may still `raise` one when exception flow suits them better.
    """

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class DecodeError(ProtocolError):
    """A single wire string could not be parsed into a Frame."""

    def __init__(self, reason: str, raw: Optional[str] = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.raw = raw


class InvalidFrameData(ProtocolError):
    def __init__(self, reason: str = "Invalid frame data") -> None:
        super().__init__(reason)
        self.reason = reason


class InconsistentTotal(ProtocolError):
    def __init__(self, totals: Sequence[int]) -> None:
        totals = sorted(set(totals))
        super().__init__(f"Inconsistent total frame count: {totals}")
        self.totals = totals


class MissingFrames(ProtocolError):
    def __init__(self, missing: Sequence[int]) -> None:
        missing = sorted(missing)
        super().__init__("Missing frames: " + ", ".join(str(i) for i in missing))
        self.missing: List[int] = missing


class NoFrames(ProtocolError):
    def __init__(self) -> None:
        super().__init__("No frames provided")


class NotReady(ProtocolError):
    def __init__(self, missing: Sequence[int] = ()) -> None:
        missing = sorted(missing)
        detail = ", ".join(str(i) for i in missing) or "none seen"
        super().__init__(f"Transmission incomplete; missing frames: {detail}")
        self.missing: List[int] = missing


@dataclasses.dataclass
class FrameMetadata:
    total_chunks: Optional[int] = None
    timestamp: Optional[int] = None  # epoch milliseconds
    checksum: Optional[str] = None  # lower-case hex
    encoding: Optional[str] = config.DEFAULT_ENCODING

    def to_dict(self) -> dict:
        data = {
            "totalChunks": self.total_chunks,
            "timestamp": self.timestamp,
            "checksum": self.checksum,
            "encoding": self.encoding,
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FrameMetadata":
        total_chunks = data.get("totalChunks")
        timestamp = data.get("timestamp")
        checksum = data.get("checksum")
        encoding = data.get("encoding")
        if total_chunks is not None and not _is_int(total_chunks):
            raise ValueError("metadata totalChunks must be an integer")
        if timestamp is not None and not (
            _is_int(timestamp) or (isinstance(timestamp, float) and math.isfinite(timestamp))
        ):
            raise ValueError("metadata timestamp must be a finite number")
        if checksum is not None and not isinstance(checksum, str):
            raise ValueError("metadata checksum must be a string")
        if encoding is not None and not isinstance(encoding, str):
            raise ValueError("metadata encoding must be a string")
        return cls(
            total_chunks=total_chunks,
            timestamp=int(timestamp) if timestamp is not None else None,
            checksum=checksum or None,
            encoding=encoding,
        )


@dataclasses.dataclass
class Frame:
    index: int
    total: int
    payload: str
    metadata: Optional[FrameMetadata] = None  # only on index 0
    version: int = config.PROTOCOL_VERSION


@dataclasses.dataclass
class ValidatedSet:
    frames: List[Frame]  # unique by index, arrival order
    total: int


@dataclasses.dataclass
class IntegrityResult:
    valid: bool
    reason: str
    expected: Optional[str] = None
    actual: Optional[str] = None


@dataclasses.dataclass
class ReconstructionResult:
    text: str
    metadata: FrameMetadata
    integrity: IntegrityResult


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
