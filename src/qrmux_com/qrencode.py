from __future__ import annotations

from typing import List, Sequence

import cv2
import numpy as np
import segno

from . import config


def make_qr(payload: str, error: str = config.DEFAULT_ERROR_LEVEL) -> segno.QRCode:
    return segno.make(payload, error=error, micro=False, boost_error=False)


def make_qr_array(
    payload: str,
    scale: int = config.DEFAULT_SCALE,
    border: int = config.DEFAULT_BORDER,
    error: str = config.DEFAULT_ERROR_LEVEL,
    fg: int = config.DEFAULT_COLOR_FG,
    bg: int = config.DEFAULT_COLOR_BG,
) -> np.ndarray:
    """Render a frame string as a grayscale uint8 image."""
    qr = make_qr(payload, error=error)
    matrix = np.array(qr.matrix, dtype=np.uint8)
    matrix = np.pad(matrix, border, constant_values=0)
    arr = np.repeat(np.repeat(matrix, scale, axis=0), scale, axis=1)
    arr = np.where(arr > 0, fg, bg).astype(np.uint8)
    return arr


def save_qr_png(
    payload: str,
    path: str,
    scale: int = config.DEFAULT_SCALE,
    border: int = config.DEFAULT_BORDER,
    error: str = config.DEFAULT_ERROR_LEVEL,
) -> None:
    make_qr(payload, error=error).save(path, kind="png", scale=scale, border=border)


def pad_to(
    image: np.ndarray,
    height: int,
    width: int,
    bg: int = config.DEFAULT_COLOR_BG,
) -> np.ndarray:
    """Center `image` on a bg canvas of the given size."""
    h, w = image.shape[:2]
    if h > height or w > width:
        raise ValueError(f"image {w}x{h} does not fit in {width}x{height}")
    canvas = np.full((height, width), bg, dtype=np.uint8)
    y = (height - h) // 2
    x = (width - w) // 2
    canvas[y : y + h, x : x + w] = image
    return canvas


def uniform_size(images: Sequence[np.ndarray], bg: int = config.DEFAULT_COLOR_BG) -> List[np.ndarray]:
    """Pad every image to the largest height and width among them."""
    if not images:
        return []
    height = max(img.shape[0] for img in images)
    width = max(img.shape[1] for img in images)
    return [pad_to(img, height, width, bg) for img in images]


def compose_grid(
    qr_arrays: List[np.ndarray],
    rows: int,
    cols: int,
    gap: int = config.DEFAULT_GAP,
    bg: int = config.DEFAULT_COLOR_BG,
) -> np.ndarray:
    """Lay out up to rows*cols QR images on one screen; empty cells stay blank."""
    if not qr_arrays:
        raise ValueError("compose_grid needs at least one image")
    total_cells = rows * cols
    qr_arrays = uniform_size(qr_arrays[:total_cells], bg)
    if len(qr_arrays) < total_cells:
        blank = np.full_like(qr_arrays[0], bg)
        qr_arrays = qr_arrays + [blank] * (total_cells - len(qr_arrays))

    h, w = qr_arrays[0].shape[:2]
    canvas_h = rows * h + (rows - 1) * gap
    canvas_w = cols * w + (cols - 1) * gap
    canvas = np.full((canvas_h, canvas_w), bg, dtype=np.uint8)

    idx = 0
    for r in range(rows):
        for c in range(cols):
            y = r * (h + gap)
            x = c * (w + gap)
            canvas[y : y + h, x : x + w] = qr_arrays[idx]
            idx += 1
    return canvas


def overlay_text(
    image: np.ndarray,
    text: str,
    pos: tuple[int, int] = (10, 24),
    color: int = 128,
    scale: float = 0.6,
    thickness: int = 1,
) -> np.ndarray:
    """Overlay small status text on the composed image."""
    img = image.copy()
    cv2.putText(
        img,
        text,
        pos,
        cv2.FONT_HERSHEY_SIMPLEX,
        scale,
        int(color),
        thickness,
        lineType=cv2.LINE_AA,
    )
    return img
