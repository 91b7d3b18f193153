"""Codec modules for Quadtree Image Codec."""

from .compressor import ImageCompressor, check_cutoffs
from .decoder import ImageDecoder

__all__ = [
    'ImageCompressor',
    'ImageDecoder',
    'check_cutoffs',
]
