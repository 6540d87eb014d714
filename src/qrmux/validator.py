from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Union

from . import config
from .models import (
    DecodeError,
    Frame,
    InconsistentTotal,
    InvalidFrameData,
    MissingFrames,
    NoFrames,
    ValidatedSet,
    _is_int,
)

log = logging.getLogger(__name__)

ValidationError = Union[InvalidFrameData, InconsistentTotal, MissingFrames, NoFrames]


def dedupe_frames(frames: Iterable[Frame]) -> List[Frame]:
    """Keep the first frame seen for each index, preserving arrival order."""
    seen: Dict[int, Frame] = {}
    for frame in frames:
        if frame.index in seen:
            log.debug("dropping duplicate frame %d", frame.index)
            continue
        seen[frame.index] = frame
    return list(seen.values())


def frame_problem(item: object) -> Optional[str]:
    """Describe why `item` is not a usable frame, or None if it is."""
    if isinstance(item, DecodeError):
        return item.reason
    if not isinstance(item, Frame):
        return "Invalid frame data"
    if not _is_int(item.index) or not _is_int(item.total):
        return "frame index and total must be integers"
    if not isinstance(item.payload, str):
        return "frame payload must be a string"
    if not 1 <= item.total <= config.MAX_TOTAL_FRAMES:
        return f"total {item.total} out of range"
    if not 0 <= item.index < item.total:
        return f"index {item.index} out of range for total {item.total}"
    return None


def missing_indices(present: Iterable[int], total: int) -> List[int]:
    have = set(present)
    return [i for i in range(total) if i not in have]


def validate_frames(
    frames: Iterable[Union[Frame, DecodeError, None]],
) -> Union[ValidatedSet, ValidationError]:
    """
    Check that a batch of decoded frames forms one complete transmission.
    Order of checks: malformed input, duplicates, total agreement, gaps.
    """
    batch = list(frames)
    if not batch:
        return NoFrames()

    for item in batch:
        reason = frame_problem(item)
        if reason is not None:
            log.debug("rejecting batch: %s", reason)
            return InvalidFrameData(reason)

    unique = dedupe_frames(batch)

    totals = {f.total for f in unique}
    if len(totals) != 1:
        return InconsistentTotal(totals)
    (total,) = totals

    if len(unique) != total:
        return MissingFrames(missing_indices((f.index for f in unique), total))

    return ValidatedSet(frames=unique, total=total)
