import json

import pytest

from qrmux import config
from qrmux.frames import decode_frame, encode_frame
from qrmux.models import DecodeError, Frame, FrameMetadata

META = FrameMetadata(total_chunks=2, timestamp=1700000000000, checksum="abc", encoding="utf-8")


def test_encode_layout_is_deterministic():
    raw = encode_frame("Hi", 0, 1, FrameMetadata(total_chunks=1, timestamp=1, checksum="921"))
    assert raw == (
        '{"v":1,"i":0,"t":1,"d":"Hi",'
        '"m":{"totalChunks":1,"timestamp":1,"checksum":"921","encoding":"utf-8"}}'
    )


def test_metadata_only_on_first_frame():
    assert "m" in json.loads(encode_frame("a", 0, 2, META))
    assert "m" not in json.loads(encode_frame("b", 1, 2, META))


def test_encode_accepts_plain_dict_metadata():
    raw = encode_frame("a", 0, 1, {"checksum": "61"})
    assert decode_frame(raw).metadata.checksum == "61"


def test_encode_rejects_bad_positions():
    with pytest.raises(ValueError):
        encode_frame("a", 1, 1)
    with pytest.raises(ValueError):
        encode_frame("a", 0, 0)


def test_decode_first_frame():
    frame = decode_frame(encode_frame("hello", 0, 2, META))
    assert isinstance(frame, Frame)
    assert (frame.version, frame.index, frame.total, frame.payload) == (1, 0, 2, "hello")
    assert frame.metadata == META


def test_decode_keeps_unicode():
    raw = encode_frame("你好 🌍", 1, 2)
    assert "你好" in raw
    assert decode_frame(raw).payload == "你好 🌍"


def test_decode_bytes_input():
    frame = decode_frame(encode_frame("b", 1, 2).encode("utf-8"))
    assert isinstance(frame, Frame)
    assert frame.metadata is None


def test_metadata_on_later_frame_is_ignored():
    raw = json.dumps({"v": 1, "i": 1, "t": 2, "d": "x", "m": {"checksum": "1"}})
    assert decode_frame(raw).metadata is None


def test_null_metadata_on_first_frame():
    raw = json.dumps({"v": 1, "i": 0, "t": 1, "d": "x", "m": None})
    frame = decode_frame(raw)
    assert isinstance(frame, Frame)
    assert frame.metadata is None


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "",
        "[1, 2, 3]",
        '"just a string"',
        '{"v":1,"i":0,"t":1}',
        '{"v":1,"i":"0","t":1,"d":"x"}',
        '{"v":1,"i":0,"t":1.0,"d":"x"}',
        '{"v":1,"i":true,"t":1,"d":"x"}',
        '{"v":1,"i":0,"t":1,"d":5}',
        '{"v":1,"i":0,"t":1,"d":null}',
        '{"v":2,"i":0,"t":1,"d":"x"}',
        '{"v":1,"i":0,"t":0,"d":"x"}',
        '{"v":1,"i":3,"t":3,"d":"x"}',
        '{"v":1,"i":-1,"t":3,"d":"x"}',
        '{"v":1,"i":0,"t":1,"d":"x","m":"meta"}',
        '{"v":1,"i":0,"t":1,"d":"x","m":{"checksum":42}}',
        '{"v":1,"i":0,"t":1,"d":"x","m":{"totalChunks":"1"}}',
        '{"v":1,"i":0,"t":1,"d":"x","m":{"timestamp":Infinity}}',
        '{"v":1,"i":0,"t":1,"d":"x","m":{"timestamp":-Infinity}}',
        '{"v":1,"i":0,"t":1,"d":"x","m":{"timestamp":NaN}}',
        '{"v":1,"i":0,"t":1,"d":"x","m":{"timestamp":1e400}}',
        "[" * 3000,
        '{"d":' + "[" * 3000,
        '{"v":1,"i":0,"t":65536,"d":"x"}',
        '{"v":1,"i":0,"t":20000000,"d":"x"}',
    ],
)
def test_malformed_frames_return_decode_error(raw):
    result = decode_frame(raw)
    assert isinstance(result, DecodeError)
    assert result.reason


def test_non_string_input():
    assert isinstance(decode_frame(None), DecodeError)
    assert isinstance(decode_frame(b"\xff\xfe"), DecodeError)


def test_largest_total_is_accepted():
    raw = encode_frame("x", config.MAX_TOTAL_FRAMES - 1, config.MAX_TOTAL_FRAMES)
    assert decode_frame(raw).total == config.MAX_TOTAL_FRAMES


def test_encode_rejects_total_over_limit():
    with pytest.raises(ValueError):
        encode_frame("x", 0, config.MAX_TOTAL_FRAMES + 1)


def test_metadata_rejects_non_finite_timestamp():
    for value in (float("inf"), float("-inf"), float("nan")):
        with pytest.raises(ValueError):
            FrameMetadata.from_dict({"timestamp": value})
    assert FrameMetadata.from_dict({"timestamp": 1.5e12}).timestamp == 1500000000000
