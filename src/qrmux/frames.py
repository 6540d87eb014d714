from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Union

from . import config
from .models import DecodeError, Frame, FrameMetadata, _is_int

_REQUIRED_FIELDS = ("v", "i", "t", "d")

MetadataLike = Union[FrameMetadata, Mapping[str, Any], None]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def encode_frame(
    chunk: str,
    index: int,
    total: int,
    metadata: MetadataLike = None,
) -> str:
    """Pack one chunk into its wire string. Metadata is only emitted on frame 0."""
    if not _is_int(total) or not 1 <= total <= config.MAX_TOTAL_FRAMES:
        raise ValueError(f"total must be in 1..{config.MAX_TOTAL_FRAMES}, got {total!r}")
    if not _is_int(index) or not 0 <= index < total:
        raise ValueError(f"index {index!r} out of range for total {total}")
    obj = {
        "v": config.PROTOCOL_VERSION,
        "i": index,
        "t": total,
        "d": chunk,
    }
    if index == 0 and metadata is not None:
        if isinstance(metadata, FrameMetadata):
            metadata = metadata.to_dict()
        obj["m"] = dict(metadata)
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


def decode_frame(raw: str) -> Union[Frame, DecodeError]:
    """
    Parse a wire string. Never raises for bad input: a DecodeError is
    returned instead. Only single-frame well-formedness is checked here.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode(config.DEFAULT_ENCODING)
        except UnicodeDecodeError as exc:
            return DecodeError(f"frame is not valid {config.DEFAULT_ENCODING}: {exc}")
    if not isinstance(raw, str):
        return DecodeError(f"frame must be a string, got {type(raw).__name__}")
    try:
        obj = json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        return DecodeError(f"invalid JSON: {exc}", raw)
    if not isinstance(obj, dict):
        return DecodeError("frame is not a JSON object", raw)

    missing = [name for name in _REQUIRED_FIELDS if name not in obj]
    if missing:
        return DecodeError(f"missing fields: {', '.join(missing)}", raw)
    version, index, total, payload = (obj[name] for name in _REQUIRED_FIELDS)
    for name, value in (("v", version), ("i", index), ("t", total)):
        if not _is_int(value):
            return DecodeError(f"field {name!r} must be an integer", raw)
    if not isinstance(payload, str):
        return DecodeError("field 'd' must be a string", raw)
    if version != config.PROTOCOL_VERSION:
        return DecodeError(f"unsupported version {version}", raw)
    if not 1 <= total <= config.MAX_TOTAL_FRAMES:
        return DecodeError(f"total must be in 1..{config.MAX_TOTAL_FRAMES}, got {total}", raw)
    if not 0 <= index < total:
        return DecodeError(f"index {index} out of range for total {total}", raw)

    metadata: Optional[FrameMetadata] = None
    meta_obj = obj.get("m")
    if meta_obj is not None:
        if not isinstance(meta_obj, dict):
            return DecodeError("field 'm' must be an object", raw)
        if index == 0:
            try:
                metadata = FrameMetadata.from_dict(meta_obj)
            except ValueError as exc:
                return DecodeError(f"bad metadata: {exc}", raw)

    return Frame(
        index=index,
        total=total,
        payload=payload,
        metadata=metadata,
        version=version,
    )
