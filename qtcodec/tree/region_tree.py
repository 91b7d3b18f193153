"""Region quadtree with per-region value statistics."""

from typing import List, Sequence, Tuple, Union
import numpy as np

from ..constants import LEAF_SIZE, MAX_SAMPLE
from ..errors import InvalidDimensions


class Leaf:
    """A 2x2 pixel block stored sample-for-sample."""

    __slots__ = ('tl', 'tr', 'bl', 'br')

    size = LEAF_SIZE

    def __init__(self, tl: int, tr: int, bl: int, br: int):
        self.tl = tl
        self.tr = tr
        self.bl = bl
        self.br = br

    @property
    def samples(self) -> Tuple[int, int, int, int]:
        return (self.tl, self.tr, self.bl, self.br)

    @property
    def low(self) -> int:
        return min(self.tl, self.tr, self.bl, self.br)

    @property
    def high(self) -> int:
        return max(self.tl, self.tr, self.bl, self.br)

    @property
    def average(self) -> int:
        """Flat average of the four samples (floored)."""
        return (self.tl + self.tr + self.bl + self.br) // 4

    def contrast(self) -> int:
        return self.high - self.low

    def __repr__(self):
        return f"Leaf({self.tl}, {self.tr}, {self.bl}, {self.br})"


class Branch:
    """
    A square region of side `size` > 2 split into four quadrants.

    Attributes:
        children: Quadrants in order (top-left, top-right, bottom-left, bottom-right)
        corners: Exact samples at the region's bounding-box corners (tl, tr, bl, br)
        low: Minimum sample anywhere in the subtree
        high: Maximum sample anywhere in the subtree
        average: Floored mean of the four corners
        size: Side length of the region
    """

    __slots__ = ('children', 'corners', 'low', 'high', 'average', 'size')

    def __init__(self, children, corners: Tuple[int, int, int, int],
                 low: int, high: int, size: int):
        self.children = tuple(children)
        self.corners = tuple(corners)
        self.low = low
        self.high = high
        self.average = sum(self.corners) // 4
        self.size = size

    def contrast(self) -> int:
        return self.high - self.low

    def __repr__(self):
        return (f"Branch(size={self.size}, low={self.low}, high={self.high}, "
                f"corners={self.corners})")


Node = Union[Leaf, Branch]


def is_valid_rank(rank: int) -> bool:
    """True if rank is a power of two and at least 2."""
    return isinstance(rank, (int, np.integer)) and rank >= LEAF_SIZE and (rank & (rank - 1)) == 0


def validate_bitmap(bitmap, rank: int) -> List[int]:
    """
    Check a single-channel bitmap against its rank.

    Args:
        bitmap: Flat row-major samples (list, bytes or numpy array)
        rank: Side length of the square bitmap

    Returns:
        Samples as a flat list of Python ints

    Raises:
        InvalidDimensions: If rank is not a power of two >= 2 or the
            length does not equal rank * rank
        ValueError: If a sample lies outside [0, 255] or is not a whole number
    """
    if not is_valid_rank(rank):
        raise InvalidDimensions(f"Rank must be a power of two >= {LEAF_SIZE}, got {rank}")

    if isinstance(bitmap, (bytes, bytearray)):
        pixels = np.frombuffer(bytes(bitmap), dtype=np.uint8)
    else:
        pixels = np.asarray(bitmap).ravel()

    if pixels.size != rank * rank:
        raise InvalidDimensions(
            f"Bitmap size mismatch. Expected {rank * rank}, got {pixels.size}")

    if pixels.dtype.kind == 'f' and not np.array_equal(pixels, np.trunc(pixels)):
        raise ValueError("Samples must be whole numbers")

    if pixels.size and (pixels.min() < 0 or pixels.max() > MAX_SAMPLE):
        raise ValueError(f"Samples must be in [0, {MAX_SAMPLE}], got "
                         f"[{pixels.min()}, {pixels.max()}]")

    return [int(p) for p in pixels.tolist()]


def build_tree(bitmap: Sequence[int], rank: int) -> Node:
    """
    Build the region quadtree for one channel.

    Args:
        bitmap: Flat row-major samples, rank * rank bytes
        rank: Side length, a power of two >= 2

    Returns:
        Root node covering the whole bitmap

    Raises:
        InvalidDimensions: If the bitmap does not describe a valid square
    """
    pixels = validate_bitmap(bitmap, rank)
    return _build_region(pixels, rank, 0, 0, rank)


def _build_region(pixels: List[int], rank: int, x: int, y: int, size: int) -> Node:
    """Build the subtree for the size x size region with top-left (x, y)."""
    if size == LEAF_SIZE:
        top = y * rank + x
        bottom = top + rank
        return Leaf(pixels[top], pixels[top + 1], pixels[bottom], pixels[bottom + 1])

    s = size // 2
    children = (
        _build_region(pixels, rank, x, y, s),
        _build_region(pixels, rank, x + s, y, s),
        _build_region(pixels, rank, x, y + s, s),
        _build_region(pixels, rank, x + s, y + s, s),
    )

    # Corners come from the bitmap, not from the children
    far = size - 1
    corners = (
        pixels[y * rank + x],
        pixels[y * rank + x + far],
        pixels[(y + far) * rank + x],
        pixels[(y + far) * rank + x + far],
    )

    return Branch(
        children,
        corners,
        low=min(c.low for c in children),
        high=max(c.high for c in children),
        size=size,
    )


def iter_samples(node: Node):
    """Yield every sample stored under node (leaf samples only)."""
    if isinstance(node, Leaf):
        yield from node.samples
        return
    for child in node.children:
        yield from iter_samples(child)


def count_nodes(node: Node) -> int:
    if isinstance(node, Leaf):
        return 1
    return 1 + sum(count_nodes(c) for c in node.children)


def tree_depth(node: Node) -> int:
    """Number of levels from node down to its leaves (a leaf has depth 1)."""
    depth = 1
    while isinstance(node, Branch):
        node = node.children[0]
        depth += 1
    return depth
