from __future__ import annotations

import argparse
import itertools
import logging
import os
import sys
from typing import Iterator, List, Sequence

import cv2
import numpy as np

from qrmux import config as protocol_config
from qrmux.sender import generate_frames, progress_label

from . import config
from .logging_setup import setup_logging
from .qrencode import compose_grid, make_qr_array, overlay_text, save_qr_png, uniform_size

log = logging.getLogger(__name__)


def _batched(seq: Sequence[str], n: int) -> Iterator[List[str]]:
    for start in range(0, len(seq), n):
        yield list(seq[start : start + n])


def read_text(input_path: str) -> str:
    if input_path == "-":
        return sys.stdin.read()
    with open(input_path, "r", encoding=protocol_config.DEFAULT_ENCODING) as f:
        return f.read()


def build_screens(
    frames: Sequence[str],
    rows: int = config.DEFAULT_GRID_ROWS,
    cols: int = config.DEFAULT_GRID_COLS,
    scale: int = config.DEFAULT_SCALE,
    status_text: bool = True,
) -> List[np.ndarray]:
    """Render frame strings into equally sized screens of rows x cols QR codes."""
    cells = rows * cols
    screens = []
    for batch in _batched(frames, cells):
        qr_arrays = [make_qr_array(s, scale=scale) for s in batch]
        screens.append(compose_grid(qr_arrays, rows, cols))
    screens = uniform_size(screens)
    log.debug("rendered %d screens for %d frames", len(screens), len(frames))
    if status_text:
        screens = [
            overlay_text(img, progress_label(min((i + 1) * cells, len(frames)), len(frames)))
            for i, img in enumerate(screens)
        ]
    return screens


def write_pngs(frames: Sequence[str], out_dir: str, scale: int = config.DEFAULT_SCALE) -> List[str]:
    os.makedirs(out_dir, exist_ok=True)
    paths = []
    for idx, payload in enumerate(frames):
        path = os.path.join(out_dir, f"frame_{idx:05d}.png")
        save_qr_png(payload, path, scale=scale)
        paths.append(path)
    return paths


def write_video(screens: Sequence[np.ndarray], output_video: str, fps: int, loops: int) -> None:
    h, w = screens[0].shape
    fourcc = cv2.VideoWriter_fourcc(*"mp4v")
    writer = cv2.VideoWriter(output_video, fourcc, fps, (w, h), isColor=False)
    try:
        for _ in range(max(1, loops)):
            for img in screens:
                writer.write(img)
    finally:
        writer.release()


def show_screens(screens: Sequence[np.ndarray], fps: int, loops: int) -> None:
    """Cycle through screens until `loops` passes are shown or q/Esc is pressed."""
    delay_ms = int(1000 / max(1, fps))
    cycle = itertools.cycle(screens) if loops <= 0 else itertools.chain.from_iterable(
        itertools.repeat(screens, loops)
    )
    try:
        for img in cycle:
            cv2.imshow(config.WINDOW_NAME, img)
            key = cv2.waitKey(delay_ms) & 0xFF
            if key in (ord("q"), 27):
                break
    finally:
        cv2.destroyAllWindows()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qrmux send", description="Show text as a QR frame stream")
    parser.add_argument("input", help="Path to a text file or '-' for stdin")
    parser.add_argument("--chunk-size", type=int, default=protocol_config.DEFAULT_CHUNK_SIZE)
    parser.add_argument("--grid-rows", type=int, default=config.DEFAULT_GRID_ROWS)
    parser.add_argument("--grid-cols", type=int, default=config.DEFAULT_GRID_COLS)
    parser.add_argument("--scale", type=int, default=config.DEFAULT_SCALE)
    parser.add_argument("--fps", type=int, default=config.DEFAULT_FPS)
    parser.add_argument("--loops", type=int, default=config.DEFAULT_LOOPS, help="0 = until closed")
    parser.add_argument("--png-dir", help="Also write one PNG per frame into this directory")
    parser.add_argument("--video-output", help="Optional path to save MP4 of the QR stream")
    parser.add_argument("--no-display", action="store_true", help="Do not open window")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.grid_rows <= 0 or args.grid_cols <= 0:
        parser.error("grid dimensions must be > 0")
    if args.no_display and not (args.video_output or args.png_dir):
        parser.error("When --no-display is set you must provide --video-output or --png-dir.")

    text = read_text(args.input)
    try:
        frames = generate_frames(text, args.chunk_size)
    except ValueError as exc:
        parser.error(str(exc))
    print(
        f"[send] chars={len(text)} frames={len(frames)} "
        f"grid={args.grid_rows}x{args.grid_cols} fps={args.fps}"
    )

    if args.png_dir:
        paths = write_pngs(frames, args.png_dir, scale=args.scale)
        print(f"[send] wrote {len(paths)} PNGs to {args.png_dir}")

    if args.video_output or not args.no_display:
        screens = build_screens(frames, args.grid_rows, args.grid_cols, scale=args.scale)
        if args.video_output:
            print(f"[send] writing video to {args.video_output}")
            write_video(screens, args.video_output, args.fps, args.loops)
        if not args.no_display:
            show_screens(screens, args.fps, args.loops)


if __name__ == "__main__":
    main()
