"""Constants for Quadtree Image Codec."""

import struct

# Magic number: 'QTIC' (QuadTree Image Codec)
MAGIC = b'QTIC'
VERSION = 0x01

# Smallest region; regions of this side are stored as 2x2 leaves
LEAF_SIZE = 2

# Header format (Little-endian, 16 bytes total)
# 4s: Magic (4B), B: Version (1B), I: Rank (4B)
# B: Luma cutoff (1B), B: Cb cutoff (1B), B: Cr cutoff (1B)
# I: Payload Length (4B)
HEADER_FORMAT = '<4sBIBBBI'
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 16 bytes

# CRC32 trailer appended after the payload
CRC_SIZE = 4

# Default (luma, cb, cr) cutoffs; chroma tolerates coarser approximation
DEFAULT_CUTOFFS = (50, 4, 100)

MAX_SAMPLE = 255

# RGB -> YCbCr (rows: Y, Cb, Cr)
YCBCR_FORWARD = (
    (0.299, 0.587, 0.114),
    (-0.169, -0.331, 0.501),
    (0.500, -0.419, -0.081),
)

# YCbCr -> RGB (rows: R, G, B; columns: Y, Cb-128, Cr-128)
YCBCR_INVERSE = (
    (1.0, 0.0, 1.402),
    (1.0, -0.344, -0.714),
    (1.0, 1.772, 0.0),
)

CHROMA_OFFSET = 128

CHANNEL_NAMES = ('luma', 'cb', 'cr')
