"""Quadtree Image Decoder - rebuilds an image from the serialized payload."""

import zlib
import numpy as np
from typing import List, Tuple

from ..constants import HEADER_SIZE, CRC_SIZE, CHANNEL_NAMES
from ..errors import FormatError
from ..io.bitstream import BitstreamReader, unpack_header
from ..transform import ycbcr_to_rgb, merge_planes
from ..tree import parse_structure, fill_regions
from ..tree.serializer import leaf_data_length
from .compressor import check_cutoffs


class ImageDecoder:
    """
    Decoder for the container written by ImageCompressor.encode.

    Pipeline (reverse of compressor):
    1. Unpack header
    2. Verify CRC
    3. Parse the three structure streams
    4. Fill regions from the three leaf-data streams
    5. YCbCr -> RGB

    Collapsed regions are stored as their corner average only, so the
    decoded image is flat where the compressor's preview interpolates.
    """

    def read_container(self, data: bytes) -> Tuple[dict, bytes]:
        """
        Split a container into its header fields and CRC-checked payload.

        Returns:
            Tuple of (header dict with 'rank', 'cutoffs', 'data_len', payload bytes)

        Raises:
            FormatError: If the header is invalid, the data is truncated or the CRC differs
        """
        if len(data) < HEADER_SIZE:
            raise FormatError(f"Data too short: {len(data)} bytes, need at least {HEADER_SIZE}")

        header = unpack_header(data[:HEADER_SIZE])
        data_len = header['data_len']

        expected_len = HEADER_SIZE + data_len + CRC_SIZE
        if len(data) < expected_len:
            raise FormatError(f"Data truncated: expected {expected_len} bytes, got {len(data)}")

        payload = data[HEADER_SIZE:HEADER_SIZE + data_len]
        crc_received = int.from_bytes(data[HEADER_SIZE + data_len:expected_len], 'little')

        crc_computed = zlib.crc32(payload) & 0xFFFFFFFF
        if crc_computed != crc_received:
            raise FormatError(f"CRC mismatch: expected {crc_received:08X}, got {crc_computed:08X}")

        return header, payload

    def decode(self, data: bytes) -> np.ndarray:
        """
        Decode a compressed image.

        Args:
            data: Container bytes

        Returns:
            (rank, rank, 3) uint8 RGB array

        Raises:
            FormatError: If data is invalid or corrupted
        """
        header, payload = self.read_container(data)
        return self.decode_payload(payload, header['rank'], header['cutoffs'])

    def decode_payload(self, payload: bytes, rank: int,
                       cutoffs: Tuple[int, int, int]) -> np.ndarray:
        """Decode a bare payload whose rank and cutoffs are known."""
        planes = self.decode_planes(payload, rank, cutoffs)
        return ycbcr_to_rgb(merge_planes(planes))

    def _parse_structures(self, payload: bytes, rank: int):
        """
        Walk the three structure streams at the head of the payload.

        Returns:
            Tuple of (regions per channel, structure bytes per channel,
            byte offset where the leaf data starts)

        Raises:
            FormatError: If the leaf data left after the structures does not
                match what the regions consume
        """
        # Each structure stream starts on a byte boundary
        reader = BitstreamReader(payload)
        channel_regions = []
        structure_bytes = []
        start = 0
        for _ in CHANNEL_NAMES:
            channel_regions.append(parse_structure(reader, rank))
            end = reader.align()
            structure_bytes.append(end - start)
            start = end

        needed = sum(leaf_data_length(regions) for regions in channel_regions)
        remaining = reader.bytes_remaining()
        if needed > remaining:
            raise FormatError(f"Leaf data truncated: need {needed} bytes, have {remaining}")
        if needed < remaining:
            raise FormatError(f"Payload has {remaining - needed} unused trailing bytes")

        return channel_regions, structure_bytes, reader.byte_ptr

    def channel_layout(self, payload: bytes, rank: int) -> dict:
        """
        Per-channel breakdown of a payload without rebuilding the planes.

        Returns:
            Dict keyed by channel name with 'structure_bytes', 'leaf_bytes'
            and 'regions' (number of leaves and collapsed branches)
        """
        channel_regions, structure_bytes, _ = self._parse_structures(payload, rank)
        layout = {}
        for name, regions, size in zip(CHANNEL_NAMES, channel_regions, structure_bytes):
            layout[name] = {
                'structure_bytes': size,
                'leaf_bytes': leaf_data_length(regions),
                'regions': len(regions),
            }
        return layout

    def decode_planes(self, payload: bytes, rank: int,
                      cutoffs: Tuple[int, int, int]) -> List[np.ndarray]:
        """
        Decode the three YCbCr planes.

        Raises:
            FormatError: If any stream underruns or bytes are left over
        """
        cutoffs = check_cutoffs(cutoffs)
        channel_regions, _, offset = self._parse_structures(payload, rank)

        planes = []
        for regions, cutoff in zip(channel_regions, cutoffs):
            plane, offset = fill_regions(regions, payload, offset, rank, cutoff)
            planes.append(plane)

        return planes
