"""Basic drawing primitives on numpy frame buffers."""

from typing import Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Buffer = NDArray[np.uint8]


def new_buffer(width: int, height: int) -> Buffer:
    """Allocate a black (height, width, 3) RGB buffer."""
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

    # Entities live in float coordinates
    x1 = max(0, min(int(round(x)), w))
    y1 = max(0, min(int(round(y)), h))
    x2 = max(0, min(int(round(x + width)), w))
    y2 = max(0, min(int(round(y + height)), h))

    if x1 >= x2 or y1 >= y2:
        return

    if filled:
        buffer[y1:y2, x1:x2] = color
        return

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
    """Draw a filled circle (distance based)."""
    h, w = buffer.shape[:2]
    y_indices, x_indices = np.ogrid[:h, :w]
    dist_sq = (x_indices - cx) ** 2 + (y_indices - cy) ** 2
    buffer[dist_sq <= radius ** 2] = color


def draw_triangle(
    buffer: Buffer,
    x: float,
    y: float,
    width: float,
    height: float,
    color: Color,
) -> None:
    """Draw an upward pointing filled triangle inside the given box."""
    h, w = buffer.shape[:2]
    if width <= 0 or height <= 0:
        return

    y_indices, x_indices = np.ogrid[:h, :w]
    cx = x + width / 2
    # Half width grows linearly from the apex down to the base
    half = (y_indices - y) / height * (width / 2)
    mask = (
        (y_indices >= y)
        & (y_indices < y + height)
        & (np.abs(x_indices - cx) <= half)
    )
    buffer[mask] = color


def shade_outside_circle(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color = (0, 0, 0),
    opacity: float = 1.0,
) -> None:
    """Blend ``color`` over every pixel farther than ``radius`` from the center.

    Used for the limited-visibility fog. ``opacity`` 1.0 paints the fog
    solid; lower values let the scene show through.
    """
    h, w = buffer.shape[:2]
    y_indices, x_indices = np.ogrid[:h, :w]
    dist_sq = (x_indices - cx) ** 2 + (y_indices - cy) ** 2
    mask = dist_sq > radius ** 2

    if opacity >= 1.0:
        buffer[mask] = color
        return

    fog = np.asarray(color, dtype=np.float32)
    region = buffer[mask].astype(np.float32)
    buffer[mask] = (region * (1.0 - opacity) + fog * opacity).astype(np.uint8)
