from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

import cv2

from qrmux import config as protocol_config
from qrmux.accumulator import FrameAccumulator, InsertStatus
from qrmux.models import ProtocolError, ReconstructionResult

from . import config
from .logging_setup import setup_logging

log = logging.getLogger(__name__)


def iter_capture_payloads(cap: "cv2.VideoCapture", detector: "cv2.QRCodeDetector") -> Iterator[List[str]]:
    """Yield the QR strings found in each captured image until the source ends."""
    while True:
        ret, frame = cap.read()
        if not ret:
            return
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY) if frame.ndim == 3 else frame
        retval, decoded_info, _points, _ = detector.detectAndDecodeMulti(gray)
        yield [data for data in decoded_info if data] if retval else []


def consume_payloads(
    batches: Iterable[List[str]],
    assembler: FrameAccumulator,
    idle_timeout: Optional[float] = config.DEFAULT_IDLE_TIMEOUT,
    clock: Callable[[], float] = time.monotonic,
    report_interval: float = config.DEFAULT_REPORT_INTERVAL,
    report: Callable[[str], None] = print,
) -> bool:
    """
    Feed decoded QR strings into the accumulator.
    Stops when the transmission is complete, the source is exhausted, or no new
    frame has been accepted for `idle_timeout` seconds. Returns completion.
    """
    last_new = clock()
    last_report = last_new
    for batch in batches:
        for data in batch:
            status = assembler.insert(data)
            if status is InsertStatus.ACCEPTED:
                last_new = clock()
            elif isinstance(status, ProtocolError):
                log.debug("skipped payload: %s", status)
        if assembler.is_complete():
            return True
        now = clock()
        if now - last_report > report_interval:
            report(f"[receive] {assembler.progress()}")
            last_report = now
        if idle_timeout and now - last_new > idle_timeout:
            log.warning("no new frame for %.1fs; missing %s", idle_timeout, assembler.missing())
            return False
    return assembler.is_complete()


def write_text(text: str, output_path: str) -> None:
    if output_path == "-":
        sys.stdout.write(text)
        return
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding=protocol_config.DEFAULT_ENCODING)


def finish(assembler: FrameAccumulator, strict: bool = False) -> ReconstructionResult:
    """Finalize the accumulator, raising for anything the caller cannot use."""
    result = assembler.finalize()
    if isinstance(result, ProtocolError):
        raise RuntimeError(f"Transmission incomplete ({assembler.progress()}); {result}")
    if not result.integrity.valid:
        msg = (
            f"{result.integrity.reason}; expected {result.integrity.expected}, "
            f"got {result.integrity.actual}"
        )
        if strict:
            raise RuntimeError(msg)
        print(f"[receive] warning: {msg}")
    return result


def process_stream(
    source: str,
    camera: bool = False,
    output_path: str = "received.txt",
    idle_timeout: Optional[float] = config.DEFAULT_IDLE_TIMEOUT,
    strict: bool = False,
) -> ReconstructionResult:
    cap = cv2.VideoCapture(0 if camera else source)
    if not cap.isOpened():
        raise RuntimeError(f"Unable to open {'camera' if camera else source}")
    detector = cv2.QRCodeDetector()
    assembler = FrameAccumulator()

    try:
        consume_payloads(iter_capture_payloads(cap, detector), assembler, idle_timeout=idle_timeout)
    finally:
        cap.release()

    result = finish(assembler, strict=strict)
    write_text(result.text, output_path)
    if output_path != "-":
        print(f"[receive] {len(result.text)} chars restored to {output_path}")
    return result


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qrmux receive", description="Scan a QR frame stream back into text")
    parser.add_argument("--input", help="Video file path; omit to use camera", default=None)
    parser.add_argument("--output", default="received.txt", help="Output file or '-' for stdout")
    parser.add_argument(
        "--idle-timeout",
        type=float,
        default=config.DEFAULT_IDLE_TIMEOUT,
        help="Give up after this many seconds without a new frame (0 = never)",
    )
    parser.add_argument("--strict", action="store_true", help="Fail on checksum mismatch")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main(argv: List[str] | None = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    camera = args.input is None
    process_stream(
        source=args.input or "0",
        camera=camera,
        output_path=args.output,
        idle_timeout=args.idle_timeout,
        strict=args.strict,
    )


if __name__ == "__main__":
    main()
