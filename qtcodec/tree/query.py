"""Point reconstruction from a region quadtree at a chosen cutoff."""

from typing import Tuple
import numpy as np

from ..constants import MAX_SAMPLE
from ..errors import OutOfBounds
from .region_tree import Leaf, Branch, Node

Point = Tuple[int, int]


def lerp(a: float, b: float, f: float) -> int:
    """Linear interpolation in floating point, truncated to a byte."""
    return int(a * (1.0 - f) + b * f)


def check_cutoff(cutoff: int) -> int:
    if not 0 <= cutoff <= MAX_SAMPLE:
        raise ValueError(f"Cutoff must be 0-{MAX_SAMPLE}, got {cutoff}")
    if int(cutoff) != cutoff:
        raise ValueError(f"Cutoff must be a whole number, got {cutoff}")
    return int(cutoff)


def _check_point(node: Node, point: Point) -> Tuple[int, int]:
    x, y = point
    if not (0 <= x < node.size and 0 <= y < node.size):
        raise OutOfBounds(f"Point ({x}, {y}) outside [0, {node.size})^2")
    return int(x), int(y)


def exact(node: Node, point: Point) -> int:
    """Literal sample at point (cutoff 0, never approximates)."""
    return approx(node, point, 0)


def approx(node: Node, point: Point, cutoff: int) -> int:
    """
    Reconstruct the sample at point, collapsing regions whose contrast
    is below cutoff.

    Collapsed leaves return the floored mean of their four samples.
    Collapsed branches interpolate their four corner samples bilinearly;
    points on the region's left or top edge get half that value.

    Args:
        node: Root of the tree (covers [0, node.size)^2)
        point: (x, y) position
        cutoff: Contrast threshold (0-255)

    Returns:
        Reconstructed sample (0-255)

    Raises:
        OutOfBounds: If point lies outside the tree
    """
    cutoff = check_cutoff(cutoff)
    x, y = _check_point(node, point)

    xo, yo = 0, 0
    while isinstance(node, Branch):
        size = node.size
        if node.high - node.low < cutoff:
            return _interpolate(node, x - xo, y - yo)

        half = size // 2
        left = (x - xo) < half
        top = (y - yo) < half
        if left and top:
            node = node.children[0]
        elif top:
            node = node.children[1]
            xo += half
        elif left:
            node = node.children[2]
            yo += half
        else:
            node = node.children[3]
            xo += half
            yo += half

    if node.contrast() < cutoff:
        return node.average
    return node.samples[(y - yo) * 2 + (x - xo)]


def _interpolate(node: Branch, dx: int, dy: int) -> int:
    """Bilinear corner interpolation at offset (dx, dy) inside node."""
    tl, tr, bl, br = node.corners
    fx = dx / node.size
    fy = dy / node.size
    top = lerp(tl, tr, fx)
    bottom = lerp(bl, br, fx)
    value = lerp(top, bottom, fy)
    if dx == 0 or dy == 0:
        value //= 2
    return value


def render(node: Node, cutoff: int) -> np.ndarray:
    """
    Reconstruct a whole channel.

    Produces, for every point, the same value as approx(node, point, cutoff)
    in a single traversal.

    Returns:
        2D uint8 array of shape (node.size, node.size), indexed [y, x]
    """
    cutoff = check_cutoff(cutoff)
    canvas = np.zeros((node.size, node.size), dtype=np.uint8)
    _render_region(node, cutoff, canvas, 0, 0)
    return canvas


def _render_region(node: Node, cutoff: int, canvas: np.ndarray, xo: int, yo: int) -> None:
    if isinstance(node, Leaf):
        if node.contrast() < cutoff:
            canvas[yo:yo + 2, xo:xo + 2] = node.average
        else:
            canvas[yo:yo + 2, xo:xo + 2] = [[node.tl, node.tr], [node.bl, node.br]]
        return

    size = node.size
    if node.high - node.low < cutoff:
        canvas[yo:yo + size, xo:xo + size] = interpolate_region(node.corners, size)
        return

    half = size // 2
    _render_region(node.children[0], cutoff, canvas, xo, yo)
    _render_region(node.children[1], cutoff, canvas, xo + half, yo)
    _render_region(node.children[2], cutoff, canvas, xo, yo + half)
    _render_region(node.children[3], cutoff, canvas, xo + half, yo + half)


def interpolate_region(corners: Tuple[int, int, int, int], size: int) -> np.ndarray:
    """Vectorised form of the collapsed-branch interpolation for a whole region."""
    tl, tr, bl, br = corners
    f = np.arange(size, dtype=np.float64) / size

    top = np.trunc(tl * (1.0 - f) + tr * f)
    bottom = np.trunc(bl * (1.0 - f) + br * f)

    fy = f[:, np.newaxis]
    block = np.trunc(top[np.newaxis, :] * (1.0 - fy) + bottom[np.newaxis, :] * fy)
    block = block.astype(np.int64)

    block[0, :] //= 2
    block[1:, 0] //= 2
    return block.astype(np.uint8)
