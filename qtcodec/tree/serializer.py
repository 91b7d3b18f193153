"""
Structure and leaf-data streams for a region quadtree.

Both streams come from the same pre-order walk at a given cutoff:

- Structure stream: one bit per visited node. Leaves and collapsed
  branches (contrast below cutoff) emit 0; expanded branches emit 1
  followed by their four children.
- Leaf-data stream: leaves emit their four samples (tl, tr, bl, br),
  collapsed branches emit their corner average, expanded branches
  emit nothing themselves.

A 0 bit is a leaf or a collapsed branch depending on the size of the
region being visited, which the decoder derives from the rank: size 2
is a leaf (4 bytes), anything larger is a collapsed branch (1 byte).
"""

import io
from typing import List, Tuple
import numpy as np

from ..constants import LEAF_SIZE
from ..errors import FormatError
from ..io.bitstream import BitstreamWriter, BitstreamReader
from .region_tree import Leaf, Node, is_valid_rank
from .query import check_cutoff

# (x, y, size) of a region the decoder reads data for
Region = Tuple[int, int, int]


def _is_collapsed(node: Node, cutoff: int) -> bool:
    return isinstance(node, Leaf) or node.high - node.low < cutoff


def _write_structure(node: Node, cutoff: int, writer: BitstreamWriter) -> None:
    if _is_collapsed(node, cutoff):
        writer.write_bit(0)
        return
    writer.write_bit(1)
    for child in node.children:
        _write_structure(child, cutoff, writer)


def encode_structure(node: Node, cutoff: int) -> Tuple[bytes, int]:
    """
    Encode the structure stream.

    Returns:
        Tuple of (byte-packed bits, number of meaningful bits)
    """
    cutoff = check_cutoff(cutoff)
    buffer = io.BytesIO()
    writer = BitstreamWriter(buffer)
    _write_structure(node, cutoff, writer)
    writer.flush()
    return buffer.getvalue(), writer.bits_written


def _write_leaf_data(node: Node, cutoff: int, out: bytearray) -> None:
    if isinstance(node, Leaf):
        out.extend(node.samples)
    elif node.high - node.low < cutoff:
        out.append(node.average)
    else:
        for child in node.children:
            _write_leaf_data(child, cutoff, out)


def encode_leaf_data(node: Node, cutoff: int) -> bytes:
    """Encode the leaf-data stream."""
    cutoff = check_cutoff(cutoff)
    out = bytearray()
    _write_leaf_data(node, cutoff, out)
    return bytes(out)


def channel_size(node: Node, cutoff: int) -> int:
    """Serialized size in bytes: ceil(structure_bits / 8) + leaf-data bytes."""
    structure, _ = encode_structure(node, cutoff)
    return len(structure) + len(encode_leaf_data(node, cutoff))


def parse_structure(reader: BitstreamReader, rank: int) -> List[Region]:
    """
    Walk one channel's structure stream.

    Leaves the reader positioned after the last structure bit (pad bits
    are not consumed).

    Args:
        reader: Reader positioned at the first bit of the stream
        rank: Side length of the channel

    Returns:
        Regions that carry leaf data, in stream order

    Raises:
        FormatError: If the stream ends early or marks a 2x2 region as expanded
    """
    if not is_valid_rank(rank):
        raise FormatError(f"Invalid rank in stream: {rank}")

    regions = []
    # Explicit stack keeps pre-order: children pushed in reverse
    stack = [(0, 0, rank)]
    while stack:
        x, y, size = stack.pop()
        try:
            bit = reader.read_bit()
        except EOFError:
            raise FormatError("Structure stream ended before the tree was complete")

        if bit == 0:
            regions.append((x, y, size))
            continue

        if size == LEAF_SIZE:
            raise FormatError(f"Expanded bit at 2x2 region ({x}, {y})")

        s = size // 2
        stack.append((x + s, y + s, s))
        stack.append((x, y + s, s))
        stack.append((x + s, y, s))
        stack.append((x, y, s))

    return regions


def leaf_data_length(regions: List[Region]) -> int:
    """Number of leaf-data bytes the given regions consume."""
    return sum(4 if size == LEAF_SIZE else 1 for _, _, size in regions)


def fill_regions(regions: List[Region], leaf_data: bytes, offset: int,
                 rank: int, cutoff: int) -> Tuple[np.ndarray, int]:
    """
    Rebuild a channel bitmap from parsed regions and their leaf data.

    Leaves whose contrast is below cutoff are flattened to their floored
    mean; collapsed branches are filled with their stored average.

    Returns:
        Tuple of (2D uint8 bitmap indexed [y, x], offset after the last byte read)

    Raises:
        FormatError: If leaf data runs out
    """
    cutoff = check_cutoff(cutoff)
    needed = leaf_data_length(regions)
    if offset + needed > len(leaf_data):
        raise FormatError(
            f"Leaf data truncated: need {needed} bytes at offset {offset}, "
            f"have {len(leaf_data) - offset}")

    bitmap = np.zeros((rank, rank), dtype=np.uint8)
    pos = offset
    for x, y, size in regions:
        if size == LEAF_SIZE:
            samples = leaf_data[pos:pos + 4]
            pos += 4
            if max(samples) - min(samples) < cutoff:
                bitmap[y:y + 2, x:x + 2] = sum(samples) // 4
            else:
                bitmap[y:y + 2, x:x + 2] = [[samples[0], samples[1]],
                                            [samples[2], samples[3]]]
        else:
            bitmap[y:y + size, x:x + size] = leaf_data[pos]
            pos += 1

    return bitmap, pos


def decode_channel(structure: bytes, leaf_data: bytes, rank: int, cutoff: int) -> np.ndarray:
    """
    Decode one channel from its two streams.

    Both streams must be consumed exactly: no trailing structure bytes
    beyond the padded final byte and no leftover leaf data.

    Raises:
        FormatError: On underrun or leftover data in either stream
    """
    reader = BitstreamReader(structure)
    regions = parse_structure(reader, rank)
    end = reader.align()
    if end != len(structure):
        raise FormatError(
            f"Structure stream has {len(structure) - end} unused trailing bytes")

    bitmap, pos = fill_regions(regions, leaf_data, 0, rank, cutoff)
    if pos != len(leaf_data):
        raise FormatError(f"Leaf data has {len(leaf_data) - pos} unused trailing bytes")
    return bitmap
