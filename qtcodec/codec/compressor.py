"""Quadtree Image Compressor - builds one region tree per colour channel."""

import io
import zlib
import multiprocessing
import numpy as np
from typing import List, Tuple

from ..constants import CHANNEL_NAMES
from ..io.bitstream import pack_header
from ..transform import rgb_to_ycbcr, ycbcr_to_rgb, to_bytes, as_rgb_image, split_planes, merge_planes
from ..tree import build_tree, render, encode_structure, encode_leaf_data
from ..tree.query import check_cutoff

Cutoffs = Tuple[int, int, int]


def check_cutoffs(cutoffs: Cutoffs) -> Cutoffs:
    """Validate a (luma, cb, cr) cutoff triple."""
    if len(cutoffs) != 3:
        raise ValueError(f"Expected 3 cutoffs (luma, cb, cr), got {len(cutoffs)}")
    return tuple(check_cutoff(c) for c in cutoffs)


def _build_channel(args):
    plane, rank = args
    return build_tree(plane, rank)


class ImageCompressor:
    """
    Compressor for square RGB images.

    Pipeline:
    1. RGB -> YCbCr (fixed linear transform)
    2. Round each channel to a byte plane
    3. Build one region quadtree per channel
    4. Per-channel cutoff: preview reconstruction, size estimate or
       structure/leaf-data serialization

    The trees are built once; every cutoff triple re-traverses them.
    """

    def __init__(self, pixels, rank: int = None, parallel: bool = False):
        """
        Build the three channel trees.

        Args:
            pixels: (rank, rank, 3) uint8 array or flat row-major RGB triples
            rank: Side length (required only when it cannot be inferred)
            parallel: Build the three channel trees in worker processes

        Raises:
            InvalidDimensions: If the image is not square with a power-of-two side
        """
        image, self.rank = as_rgb_image(pixels, rank)

        ycbcr = to_bytes(rgb_to_ycbcr(image))
        self.planes = split_planes(ycbcr)

        tasks = [(plane, self.rank) for plane in self.planes]
        if parallel:
            with multiprocessing.Pool(processes=len(tasks)) as pool:
                self.trees = pool.map(_build_channel, tasks)
        else:
            self.trees = [_build_channel(t) for t in tasks]

    @property
    def luma(self):
        return self.trees[0]

    @property
    def cb(self):
        return self.trees[1]

    @property
    def cr(self):
        return self.trees[2]

    def channel_streams(self, cutoffs: Cutoffs) -> List[Tuple[bytes, int, bytes]]:
        """
        Serialize each channel.

        Returns:
            List of (structure bytes, structure bit count, leaf data) per channel
        """
        cutoffs = check_cutoffs(cutoffs)
        streams = []
        for tree, cutoff in zip(self.trees, cutoffs):
            structure, bits = encode_structure(tree, cutoff)
            streams.append((structure, bits, encode_leaf_data(tree, cutoff)))
        return streams

    def compressed_size(self, cutoffs: Cutoffs) -> int:
        """Payload size in bytes before any generic compression."""
        return sum(len(structure) + len(data)
                   for structure, _, data in self.channel_streams(cutoffs))

    def channel_sizes(self, cutoffs: Cutoffs) -> dict:
        """Per-channel breakdown of the payload size."""
        sizes = {}
        for name, (structure, bits, data) in zip(CHANNEL_NAMES, self.channel_streams(cutoffs)):
            sizes[name] = {
                'structure_bits': bits,
                'structure_bytes': len(structure),
                'leaf_bytes': len(data),
            }
        return sizes

    def serialize(self, cutoffs: Cutoffs) -> bytes:
        """
        Assemble the payload.

        Layout: [structure Y][structure Cb][structure Cr][data Y][data Cb][data Cr],
        each structure stream padded to a byte boundary.
        """
        streams = self.channel_streams(cutoffs)
        buffer = io.BytesIO()
        for structure, _, _ in streams:
            buffer.write(structure)
        for _, _, data in streams:
            buffer.write(data)
        return buffer.getvalue()

    def encode(self, cutoffs: Cutoffs) -> bytes:
        """
        Serialize into a self-describing container.

        Returns:
            header + payload + CRC32 (little endian)
        """
        cutoffs = check_cutoffs(cutoffs)
        payload = self.serialize(cutoffs)

        crc = zlib.crc32(payload) & 0xFFFFFFFF
        header = pack_header(self.rank, cutoffs, len(payload))

        return header + payload + crc.to_bytes(4, 'little')

    def to_ycbcr_planes(self, cutoffs: Cutoffs) -> List[np.ndarray]:
        """Interpolated reconstruction of each channel as (rank, rank) uint8 planes."""
        cutoffs = check_cutoffs(cutoffs)
        return [render(tree, cutoff) for tree, cutoff in zip(self.trees, cutoffs)]

    def to_image(self, cutoffs: Cutoffs) -> np.ndarray:
        """
        Preview reconstruction at the given cutoffs.

        Returns:
            (rank, rank, 3) uint8 RGB array
        """
        return ycbcr_to_rgb(merge_planes(self.to_ycbcr_planes(cutoffs)))
