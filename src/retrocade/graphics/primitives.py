"""Basic drawing primitives on numpy frame buffers."""

from typing import Callable, Sequence, Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Buffer = NDArray[np.uint8]


def new_buffer(width: int, height: int) -> Buffer:
    """Allocate an RGB frame buffer of shape (height, width, 3)."""
    return np.zeros((height, width, 3), dtype=np.uint8)


def fill(buffer: Buffer, color: Color) -> None:
    """Fill entire buffer with color."""
    buffer[:, :] = color


def draw_rect(
    buffer: Buffer,
    x: float,
    y: float,
    width: float,
    height: float,
    color: Color,
    filled: bool = True,
    thickness: int = 1,
) -> None:
    """Draw a rectangle on the buffer, clipped to its bounds.

    Args:
        buffer: Target numpy array (height, width, 3)
        x: Left edge x coordinate
        y: Top edge y coordinate
        width: Rectangle width
        height: Rectangle height
        color: RGB color tuple
        filled: If True, fill rectangle; if False, draw outline only
        thickness: Line thickness for outline (when filled=False)
    """
    h, w = buffer.shape[:2]

    x1 = max(0, min(int(x), w))
    y1 = max(0, min(int(y), h))
    x2 = max(0, min(int(x + width), w))
    y2 = max(0, min(int(y + height), h))
    if x2 <= x1 or y2 <= y1:
        return

    if filled:
        buffer[y1:y2, x1:x2] = color
    else:
        t = max(1, thickness)
        buffer[y1:min(y1 + t, y2), x1:x2] = color
        buffer[max(y2 - t, y1):y2, x1:x2] = color
        buffer[y1:y2, x1:min(x1 + t, x2)] = color
        buffer[y1:y2, max(x2 - t, x1):x2] = color


def draw_circle(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color,
) -> None:
    """Draw a filled circle, touching only its bounding box."""
    h, w = buffer.shape[:2]
    x1, x2 = max(0, int(cx - radius)), min(w, int(cx + radius) + 1)
    y1, y2 = max(0, int(cy - radius)), min(h, int(cy + radius) + 1)
    if x2 <= x1 or y2 <= y1:
        return

    y_indices, x_indices = np.ogrid[y1:y2, x1:x2]
    mask = (x_indices - cx) ** 2 + (y_indices - cy) ** 2 <= radius ** 2
    buffer[y1:y2, x1:x2][mask] = color


def draw_line(
    buffer: Buffer,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    color: Color,
) -> None:
    """Draw a line using Bresenham's algorithm."""
    h, w = buffer.shape[:2]
    x1, y1, x2, y2 = int(x1), int(y1), int(x2), int(y2)

    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    sx = 1 if x1 < x2 else -1
    sy = 1 if y1 < y2 else -1
    err = dx - dy

    x, y = x1, y1
    while True:
        if 0 <= x < w and 0 <= y < h:
            buffer[y, x] = color

        if x == x2 and y == y2:
            break

        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy


def draw_sprite(
    buffer: Buffer,
    x: float,
    y: float,
    sprite: Sequence[str],
    scale: int,
    color: Color,
) -> None:
    """Draw a bitmap given as rows of '0'/'1' characters."""
    for row_idx, row in enumerate(sprite):
        for col_idx, pixel in enumerate(row):
            if pixel == "1":
                draw_rect(buffer, x + col_idx * scale, y + row_idx * scale,
                          scale, scale, color)


def draw_columns(
    buffer: Buffer,
    x: float,
    width: float,
    bottom: float,
    top_at: Callable[[float], float],
    color: Color,
    offset_x: float = 0.0,
) -> None:
    """Fill one-pixel columns from a sampled top edge down to `bottom`.

    `top_at` receives world x; `offset_x` converts world to screen x.
    """
    h, w = buffer.shape[:2]
    start = max(0, int(x - offset_x))
    end = min(w, int(x + width - offset_x))
    y2 = max(0, min(h, int(bottom)))
    for sx in range(start, end):
        y1 = max(0, min(h, int(top_at(sx + offset_x))))
        if y1 < y2:
            buffer[y1:y2, sx] = color


def dim(buffer: Buffer, factor: float = 0.5) -> None:
    """Darken the whole frame (pause/game over overlays)."""
    buffer[:] = (buffer * factor).astype(np.uint8)


def draw_text(
    buffer: Buffer,
    text: str,
    x: int,
    y: int,
    color: Color,
    scale: int = 1,
) -> Tuple[int, int]:
    """Draw text using the built-in 3x5 bitmap font.

    Returns:
        Tuple of (width, height) of rendered text in pixels
    """
    font = _FONT
    cursor_x = x

    for char in text:
        if char == " ":
            cursor_x += 4 * scale
            continue
        char_data = font.get(char.upper(), font["?"])
        for row_idx, row in enumerate(char_data):
            for col_idx, pixel in enumerate(row):
                if pixel:
                    draw_rect(buffer, cursor_x + col_idx * scale,
                              y + row_idx * scale, scale, scale, color)
        cursor_x += (len(char_data[0]) + 1) * scale

    return cursor_x - x, 5 * scale


def text_width(text: str, scale: int = 1) -> int:
    width = 0
    for char in text:
        if char == " ":
            width += 4 * scale
        else:
            width += (len(_FONT.get(char.upper(), _FONT["?"])[0]) + 1) * scale
    return width


def draw_centered_text(
    buffer: Buffer,
    text: str,
    y: int,
    color: Color,
    scale: int = 1,
) -> None:
    w = buffer.shape[1]
    draw_text(buffer, text, (w - text_width(text, scale)) // 2, y, color, scale)


def draw_image(
    buffer: Buffer,
    image: Buffer,
    x: int,
    y: int,
) -> None:
    """Blit an RGB or RGBA image; RGBA uses per-pixel alpha."""
    buf_h, buf_w = buffer.shape[:2]
    img_h, img_w = image.shape[:2]
    x, y = int(x), int(y)

    src_x1 = max(0, -x)
    src_y1 = max(0, -y)
    src_x2 = min(img_w, buf_w - x)
    src_y2 = min(img_h, buf_h - y)
    if src_x2 <= src_x1 or src_y2 <= src_y1:
        return

    dst_x1 = max(0, x)
    dst_y1 = max(0, y)
    dst_x2 = dst_x1 + (src_x2 - src_x1)
    dst_y2 = dst_y1 + (src_y2 - src_y1)

    src_region = image[src_y1:src_y2, src_x1:src_x2]
    if image.shape[2] == 3:
        buffer[dst_y1:dst_y2, dst_x1:dst_x2] = src_region
        return

    dst_region = buffer[dst_y1:dst_y2, dst_x1:dst_x2]
    alpha = src_region[:, :, 3:4] / 255.0
    blended = src_region[:, :, :3] * alpha + dst_region * (1 - alpha)
    buffer[dst_y1:dst_y2, dst_x1:dst_x2] = blended.astype(np.uint8)


_FONT: dict = {
    'A': [[0,1,0], [1,0,1], [1,1,1], [1,0,1], [1,0,1]],
    'B': [[1,1,0], [1,0,1], [1,1,0], [1,0,1], [1,1,0]],
    'C': [[0,1,1], [1,0,0], [1,0,0], [1,0,0], [0,1,1]],
    'D': [[1,1,0], [1,0,1], [1,0,1], [1,0,1], [1,1,0]],
    'E': [[1,1,1], [1,0,0], [1,1,0], [1,0,0], [1,1,1]],
    'F': [[1,1,1], [1,0,0], [1,1,0], [1,0,0], [1,0,0]],
    'G': [[0,1,1], [1,0,0], [1,0,1], [1,0,1], [0,1,1]],
    'H': [[1,0,1], [1,0,1], [1,1,1], [1,0,1], [1,0,1]],
    'I': [[1,1,1], [0,1,0], [0,1,0], [0,1,0], [1,1,1]],
    'J': [[0,0,1], [0,0,1], [0,0,1], [1,0,1], [0,1,0]],
    'K': [[1,0,1], [1,0,1], [1,1,0], [1,0,1], [1,0,1]],
    'L': [[1,0,0], [1,0,0], [1,0,0], [1,0,0], [1,1,1]],
    'M': [[1,0,1], [1,1,1], [1,0,1], [1,0,1], [1,0,1]],
    'N': [[1,0,1], [1,1,1], [1,1,1], [1,0,1], [1,0,1]],
    'O': [[0,1,0], [1,0,1], [1,0,1], [1,0,1], [0,1,0]],
    'P': [[1,1,0], [1,0,1], [1,1,0], [1,0,0], [1,0,0]],
    'Q': [[0,1,0], [1,0,1], [1,0,1], [1,1,1], [0,1,1]],
    'R': [[1,1,0], [1,0,1], [1,1,0], [1,0,1], [1,0,1]],
    'S': [[0,1,1], [1,0,0], [0,1,0], [0,0,1], [1,1,0]],
    'T': [[1,1,1], [0,1,0], [0,1,0], [0,1,0], [0,1,0]],
    'U': [[1,0,1], [1,0,1], [1,0,1], [1,0,1], [0,1,0]],
    'V': [[1,0,1], [1,0,1], [1,0,1], [0,1,0], [0,1,0]],
    'W': [[1,0,1], [1,0,1], [1,0,1], [1,1,1], [1,0,1]],
    'X': [[1,0,1], [1,0,1], [0,1,0], [1,0,1], [1,0,1]],
    'Y': [[1,0,1], [1,0,1], [0,1,0], [0,1,0], [0,1,0]],
    'Z': [[1,1,1], [0,0,1], [0,1,0], [1,0,0], [1,1,1]],
    '0': [[0,1,0], [1,0,1], [1,0,1], [1,0,1], [0,1,0]],
    '1': [[0,1,0], [1,1,0], [0,1,0], [0,1,0], [1,1,1]],
    '2': [[0,1,0], [1,0,1], [0,0,1], [0,1,0], [1,1,1]],
    '3': [[1,1,0], [0,0,1], [0,1,0], [0,0,1], [1,1,0]],
    '4': [[1,0,1], [1,0,1], [1,1,1], [0,0,1], [0,0,1]],
    '5': [[1,1,1], [1,0,0], [1,1,0], [0,0,1], [1,1,0]],
    '6': [[0,1,1], [1,0,0], [1,1,0], [1,0,1], [0,1,0]],
    '7': [[1,1,1], [0,0,1], [0,1,0], [0,1,0], [0,1,0]],
    '8': [[0,1,0], [1,0,1], [0,1,0], [1,0,1], [0,1,0]],
    '9': [[0,1,0], [1,0,1], [0,1,1], [0,0,1], [1,1,0]],
    '?': [[0,1,0], [1,0,1], [0,0,1], [0,0,0], [0,1,0]],
    '!': [[0,1,0], [0,1,0], [0,1,0], [0,0,0], [0,1,0]],
    '.': [[0,0,0], [0,0,0], [0,0,0], [0,0,0], [0,1,0]],
    ':': [[0,0,0], [0,1,0], [0,0,0], [0,1,0], [0,0,0]],
    '-': [[0,0,0], [0,0,0], [1,1,1], [0,0,0], [0,0,0]],
}
