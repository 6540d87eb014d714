from __future__ import annotations

import enum
import logging
from typing import Dict, List, Optional, Union

from . import config
from .frames import decode_frame
from .integrity import verify_integrity
from .models import (
    DecodeError,
    Frame,
    InconsistentTotal,
    InvalidFrameData,
    NotReady,
    ProtocolError,
    ReconstructionResult,
    ValidatedSet,
)
from .reconstruct import reconstruct
from .validator import frame_problem, missing_indices, validate_frames

log = logging.getLogger(__name__)


class AccumulatorState(enum.Enum):
    EMPTY = "empty"
    PARTIAL = "partial"
    COMPLETE = "complete"


class InsertStatus(enum.Enum):
    ACCEPTED = "accepted"
    DUPLICATE = "duplicate"
    IGNORED = "ignored"  # accumulator already finalized


class FrameAccumulator:
    """
    Collects frames of one transmission as they are scanned.
    One instance per transmission, driven by a single scanning loop; not
    safe for concurrent mutation.
    """

    def __init__(self, checksum_algorithm: str = config.DEFAULT_CHECKSUM) -> None:
        self.checksum_algorithm = checksum_algorithm
        self.reset()

    def reset(self) -> None:
        self.state = AccumulatorState.EMPTY
        self.total: Optional[int] = None
        self.frames: Dict[int, Frame] = {}
        self.result: Optional[ReconstructionResult] = None
        self.duplicates = 0
        self.conflicts = 0
        self.rejected = 0
        self._last_raw: Optional[str] = None

    @property
    def received_count(self) -> int:
        return len(self.frames)

    def insert(self, raw: str) -> Union[InsertStatus, ProtocolError]:
        if self.state is AccumulatorState.COMPLETE:
            return InsertStatus.IGNORED
        if raw == self._last_raw:
            # same QR still in view
            self.duplicates += 1
            return InsertStatus.DUPLICATE
        decoded = decode_frame(raw)
        if isinstance(decoded, DecodeError):
            self.rejected += 1
            log.debug("rejected frame: %s", decoded.reason)
            return decoded
        status = self.insert_frame(decoded)
        if status is InsertStatus.ACCEPTED or status is InsertStatus.DUPLICATE:
            self._last_raw = raw
        return status

    def insert_frame(self, frame: Frame) -> Union[InsertStatus, ProtocolError]:
        if self.state is AccumulatorState.COMPLETE:
            return InsertStatus.IGNORED
        reason = frame_problem(frame)
        if reason is not None:
            self.rejected += 1
            return InvalidFrameData(reason)
        if self.total is not None and frame.total != self.total:
            self.rejected += 1
            log.warning(
                "frame %d declares total %d, expected %d", frame.index, frame.total, self.total
            )
            return InconsistentTotal([self.total, frame.total])

        existing = self.frames.get(frame.index)
        if existing is not None:
            self.duplicates += 1
            if existing != frame:
                self.conflicts += 1
                log.warning("frame %d re-sent with different content; keeping first", frame.index)
            return InsertStatus.DUPLICATE

        self.frames[frame.index] = frame
        self.total = frame.total
        self.state = AccumulatorState.PARTIAL
        log.debug("accepted frame %d/%d", frame.index + 1, frame.total)
        return InsertStatus.ACCEPTED

    def missing(self) -> List[int]:
        if self.total is None:
            return []
        return missing_indices(self.frames, self.total)

    def is_complete(self) -> bool:
        if self.state is AccumulatorState.COMPLETE:
            return True
        if self.total is None or len(self.frames) != self.total:
            return False
        return isinstance(validate_frames(self.frames.values()), ValidatedSet)

    def finalize(self) -> Union[ReconstructionResult, NotReady]:
        if self.result is not None:
            return self.result
        validated = validate_frames(self.frames.values())
        if not isinstance(validated, ValidatedSet):
            return NotReady(self.missing())
        text, metadata = reconstruct(validated)
        integrity = verify_integrity(text, metadata, self.checksum_algorithm)
        if not integrity.valid:
            log.warning(
                "checksum mismatch: expected %s, got %s", integrity.expected, integrity.actual
            )
        self.result = ReconstructionResult(text=text, metadata=metadata, integrity=integrity)
        self.state = AccumulatorState.COMPLETE
        return self.result

    def progress(self) -> str:
        if self.total is None:
            return "waiting for frames"
        pct = len(self.frames) / self.total * 100
        return f"{len(self.frames)}/{self.total} frames ({pct:.1f}%)"
