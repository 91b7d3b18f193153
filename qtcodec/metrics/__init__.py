"""Quality metrics for Quadtree Image Codec."""

from .quality import (
    calculate_rmse,
    calculate_psnr,
    calculate_channel_psnr,
    calculate_bpp,
    calculate_compression_ratio,
    generate_error_map,
)

__all__ = [
    'calculate_rmse',
    'calculate_psnr',
    'calculate_channel_psnr',
    'calculate_bpp',
    'calculate_compression_ratio',
    'generate_error_map',
]
