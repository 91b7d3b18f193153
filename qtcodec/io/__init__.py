"""I/O modules for Quadtree Image Codec."""

from .image_reader import read_rgb_image, get_image_info
from .image_writer import write_rgb_image
from .bitstream import BitstreamWriter, BitstreamReader, pack_header, unpack_header

__all__ = [
    'read_rgb_image',
    'get_image_info',
    'write_rgb_image',
    'BitstreamWriter',
    'BitstreamReader',
    'pack_header',
    'unpack_header',
]
