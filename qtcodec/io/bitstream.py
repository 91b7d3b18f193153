"""Bitstream reader and writer plus the container header."""

import struct
from typing import Tuple

from ..constants import MAGIC, VERSION, HEADER_FORMAT, HEADER_SIZE
from ..errors import FormatError


class BitstreamWriter:
    """Bit-level writer, MSB first."""

    def __init__(self, f):
        """
        Initialize bitstream writer.

        Args:
            f: File object opened in binary write mode (e.g. io.BytesIO)
        """
        self.f = f
        self.accumulator = 0
        self.bit_count = 0
        self.bits_written = 0

    def write_bit(self, bit: int) -> None:
        """Write a single bit."""
        self.accumulator = (self.accumulator << 1) | (bit & 1)
        self.bit_count += 1
        self.bits_written += 1
        if self.bit_count == 8:
            self._flush_byte()

    def write_bits(self, value: int, num_bits: int) -> None:
        """Write multiple bits from value (MSB first)."""
        for i in range(num_bits - 1, -1, -1):
            self.write_bit((value >> i) & 1)

    def _flush_byte(self) -> None:
        self.f.write(bytes([self.accumulator]))
        self.accumulator = 0
        self.bit_count = 0

    def flush(self) -> None:
        """Pad remaining bits with 0s to reach byte boundary."""
        if self.bit_count > 0:
            padding = 8 - self.bit_count
            self.accumulator = (self.accumulator << padding)
            self.f.write(bytes([self.accumulator]))
            self.accumulator = 0
            self.bit_count = 0


class BitstreamReader:
    """Bit-level reader, MSB first."""

    def __init__(self, data_bytes: bytes, offset: int = 0):
        """
        Initialize bitstream reader.

        Args:
            data_bytes: Binary data to read from
            offset: Byte position to start reading at
        """
        self.data = data_bytes
        self.byte_ptr = offset
        self.bit_ptr = 0  # 0 to 7, current bit index (MSB=0)

    def read_bit(self) -> int:
        """Read a single bit."""
        if self.byte_ptr >= len(self.data):
            raise EOFError("End of bitstream")

        byte = self.data[self.byte_ptr]
        bit = (byte >> (7 - self.bit_ptr)) & 1

        self.bit_ptr += 1
        if self.bit_ptr == 8:
            self.bit_ptr = 0
            self.byte_ptr += 1

        return bit

    def align(self) -> int:
        """Skip pad bits up to the next byte boundary; return the new byte position."""
        if self.bit_ptr > 0:
            self.bit_ptr = 0
            self.byte_ptr += 1
        return self.byte_ptr

    def bytes_remaining(self) -> int:
        """Return number of full bytes remaining."""
        remaining = len(self.data) - self.byte_ptr
        if self.bit_ptr > 0:
            remaining -= 1
        return max(0, remaining)


def pack_header(rank: int, cutoffs: Tuple[int, int, int], data_len: int) -> bytes:
    """
    Pack metadata into a 16-byte binary header.

    Args:
        rank: Side length of the square image
        cutoffs: (luma, cb, cr) cutoffs the payload was serialized with
        data_len: Length of payload in bytes

    Returns:
        16-byte header as bytes
    """
    luma, cb, cr = cutoffs
    return struct.pack(
        HEADER_FORMAT,
        MAGIC,
        VERSION,
        rank,
        luma,
        cb,
        cr,
        data_len,
    )


def unpack_header(header_bytes: bytes) -> dict:
    """
    Unpack the 16-byte binary header.

    Returns:
        Dictionary with 'rank', 'cutoffs' and 'data_len'

    Raises:
        FormatError: If header is invalid
    """
    if len(header_bytes) != HEADER_SIZE:
        raise FormatError(f"Header size mismatch. Expected {HEADER_SIZE}, got {len(header_bytes)}")

    magic, ver, rank, luma, cb, cr, dlen = struct.unpack(HEADER_FORMAT, header_bytes)

    if magic != MAGIC:
        raise FormatError(f"Invalid file signature: {magic}. Expected {MAGIC}")

    if ver != VERSION:
        raise FormatError(f"Unsupported version: {ver}")

    return {
        'rank': rank,
        'cutoffs': (luma, cb, cr),
        'data_len': dlen,
    }
