"""Transform modules for Quadtree Image Codec."""

from .color import rgb_to_ycbcr, ycbcr_to_rgb, to_bytes
from .planes import as_rgb_image, split_planes, merge_planes

__all__ = [
    'rgb_to_ycbcr',
    'ycbcr_to_rgb',
    'to_bytes',
    'as_rgb_image',
    'split_planes',
    'merge_planes',
]
