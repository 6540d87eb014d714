from __future__ import annotations

from typing import Iterable, Tuple, Union

from . import config
from .frames import decode_frame
from .integrity import verify_integrity
from .models import FrameMetadata, ProtocolError, ReconstructionResult, ValidatedSet
from .validator import validate_frames


def reconstruct(validated: ValidatedSet) -> Tuple[str, FrameMetadata]:
    """Concatenate payloads in index order; metadata comes from frame 0."""
    if not validated.frames:
        raise ValueError("cannot reconstruct an empty frame set")
    ordered = sorted(validated.frames, key=lambda f: f.index)
    text = "".join(f.payload for f in ordered)
    metadata = ordered[0].metadata or FrameMetadata(encoding=None)
    return text, metadata


def parse_frames(
    raw_frames: Iterable[str],
    algorithm: str = config.DEFAULT_CHECKSUM,
) -> Union[ReconstructionResult, ProtocolError]:
    """Decode, validate, reconstruct and verify a batch of wire strings."""
    validated = validate_frames(decode_frame(raw) for raw in raw_frames)
    if isinstance(validated, ProtocolError):
        return validated
    text, metadata = reconstruct(validated)
    return ReconstructionResult(
        text=text,
        metadata=metadata,
        integrity=verify_integrity(text, metadata, algorithm),
    )
