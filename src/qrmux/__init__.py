"""Text-over-QR frame multiplexing protocol."""

from .accumulator import AccumulatorState, FrameAccumulator, InsertStatus
from .chunker import chunk_text, resolve_chunk_size
from .frames import decode_frame, encode_frame
from .integrity import compute_checksum, verify_integrity
from .models import (
    DecodeError,
    Frame,
    FrameMetadata,
    InconsistentTotal,
    IntegrityResult,
    InvalidFrameData,
    MissingFrames,
    NoFrames,
    NotReady,
    ProtocolError,
    ReconstructionResult,
    ValidatedSet,
)
from .reconstruct import parse_frames, reconstruct
from .sender import generate_frames
from .validator import validate_frames

__all__ = [
    "AccumulatorState",
    "DecodeError",
    "Frame",
    "FrameAccumulator",
    "FrameMetadata",
    "InconsistentTotal",
    "InsertStatus",
    "IntegrityResult",
    "InvalidFrameData",
    "MissingFrames",
    "NoFrames",
    "NotReady",
    "ProtocolError",
    "ReconstructionResult",
    "ValidatedSet",
    "chunk_text",
    "compute_checksum",
    "decode_frame",
    "encode_frame",
    "generate_frames",
    "parse_frames",
    "reconstruct",
    "resolve_chunk_size",
    "validate_frames",
    "verify_integrity",
]
