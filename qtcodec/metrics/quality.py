"""Quality metrics for image codec evaluation."""

import numpy as np


def calculate_rmse(original: np.ndarray, reconstructed: np.ndarray) -> float:
    """
    Calculate Root Mean Squared Error (RMSE) over all samples.

    Args:
        original: Original image
        reconstructed: Reconstructed image

    Returns:
        RMSE value
    """
    diff = original.astype(np.float64) - reconstructed.astype(np.float64)
    return float(np.sqrt(np.mean(diff ** 2)))


def calculate_psnr(original: np.ndarray, reconstructed: np.ndarray,
                   max_val: float = 255.0) -> float:
    """
    Calculate Peak Signal-to-Noise Ratio (PSNR).

    PSNR = 10 * log10(MAX^2 / MSE)

    Returns:
        PSNR in dB (inf for identical images)
    """
    diff = original.astype(np.float64) - reconstructed.astype(np.float64)
    mse = np.mean(diff ** 2)

    if mse == 0:
        return float('inf')

    return float(10 * np.log10((max_val ** 2) / mse))


def calculate_channel_psnr(original: np.ndarray, reconstructed: np.ndarray) -> list:
    """PSNR of each channel of (H, W, C) images."""
    return [calculate_psnr(original[..., c], reconstructed[..., c])
            for c in range(original.shape[-1])]


def calculate_bpp(compressed_size: int, image_shape: tuple) -> float:
    """
    Calculate Bits Per Pixel (BPP).

    Args:
        compressed_size: Size of compressed data in bytes
        image_shape: Tuple starting with (height, width)
    """
    num_pixels = image_shape[0] * image_shape[1]
    return (compressed_size * 8) / num_pixels


def calculate_compression_ratio(original_size: int, compressed_size: int) -> float:
    """Compression ratio (original / compressed)."""
    if compressed_size == 0:
        return float('inf')
    return original_size / compressed_size


def generate_error_map(original: np.ndarray, reconstructed: np.ndarray) -> np.ndarray:
    """
    Absolute error per pixel, taking the worst channel for RGB input.

    Returns:
        (H, W) uint8 error map
    """
    diff = np.abs(original.astype(np.int16) - reconstructed.astype(np.int16))
    if diff.ndim == 3:
        diff = diff.max(axis=-1)
    return diff.astype(np.uint8)
