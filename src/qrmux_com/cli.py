from __future__ import annotations

import argparse
import sys
from typing import List

from qrmux import config as protocol_config
from qrmux.integrity import CHECKSUM_ALGORITHMS
from qrmux.models import ProtocolError
from qrmux.reconstruct import parse_frames
from qrmux.sender import generate_frames

from . import receiver, sender
from .logging_setup import setup_logging

USAGE = "Usage: qrmux [send|receive|frames|join] ..."


def frames_main(argv: List[str]) -> None:
    """Print the wire strings for a text, one per line, without rendering QR."""
    parser = argparse.ArgumentParser(prog="qrmux frames", description="Print frame strings for a text")
    parser.add_argument("input", help="Path to a text file or '-' for stdin")
    parser.add_argument("--chunk-size", type=int, default=protocol_config.DEFAULT_CHUNK_SIZE)
    parser.add_argument(
        "--checksum", default=protocol_config.DEFAULT_CHECKSUM, choices=sorted(CHECKSUM_ALGORITHMS)
    )
    args = parser.parse_args(argv)
    try:
        frames = generate_frames(sender.read_text(args.input), args.chunk_size, algorithm=args.checksum)
    except ValueError as exc:
        parser.error(str(exc))
    for raw in frames:
        print(raw)


def join_main(argv: List[str]) -> int:
    """Rebuild text from frame strings stored one per line, in any order."""
    parser = argparse.ArgumentParser(prog="qrmux join", description="Rebuild text from frame strings")
    parser.add_argument("input", help="File with one frame per line, or '-' for stdin")
    parser.add_argument("--output", default="-", help="Output file or '-' for stdout")
    parser.add_argument(
        "--checksum", default=protocol_config.DEFAULT_CHECKSUM, choices=sorted(CHECKSUM_ALGORITHMS)
    )
    parser.add_argument("--strict", action="store_true", help="Fail on checksum mismatch")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    # JSON escapes "\n" but not other line separators such as U+2028
    lines = [line.rstrip("\r") for line in sender.read_text(args.input).split("\n") if line.strip()]
    result = parse_frames(lines, algorithm=args.checksum)
    if isinstance(result, ProtocolError):
        print(f"[join] error: {result}", file=sys.stderr)
        return 2
    if not result.integrity.valid:
        print(f"[join] warning: {result.integrity.reason}", file=sys.stderr)
        if args.strict:
            return 3
    receiver.write_text(result.text, args.output)
    return 0


def main(argv: list[str] | None = None) -> None:
    args = argv if argv is not None else sys.argv[1:]
    if not args:
        print(USAGE)
        sys.exit(1)
    cmd, *rest = args
    if cmd == "send":
        sender.main(rest)
    elif cmd == "receive":
        try:
            receiver.main(rest)
        except RuntimeError as exc:
            print(f"[receive] error: {exc}", file=sys.stderr)
            sys.exit(2)
    elif cmd == "frames":
        frames_main(rest)
    elif cmd == "join":
        code = join_main(rest)
        if code:
            sys.exit(code)
    else:
        print(f"Unknown command '{cmd}'. {USAGE}")
        sys.exit(1)


if __name__ == "__main__":
    main()
