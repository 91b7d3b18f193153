"""RGB image reader supporting Pillow formats and NumPy arrays."""

import numpy as np
from pathlib import Path
from PIL import Image, UnidentifiedImageError

from ..errors import DecodeFailure


def read_rgb_image(path: str) -> np.ndarray:
    """
    Read an image as RGB pixels.

    Args:
        path: Path to a .npy array (H, W, 3) or any format Pillow can open

    Returns:
        (H, W, 3) uint8 array

    Raises:
        DecodeFailure: If the file is missing, unreadable or not an image
    """
    path = Path(path)

    if path.suffix.lower() == '.npy':
        return _read_numpy(path)
    return _read_pillow(path)


def _read_pillow(path: Path) -> np.ndarray:
    """Read any Pillow-supported file, converting to RGB."""
    try:
        with Image.open(path) as img:
            return np.array(img.convert('RGB'), dtype=np.uint8)
    except (OSError, UnidentifiedImageError) as e:
        raise DecodeFailure(f"Cannot decode image {path}: {e}") from e


def _read_numpy(path: Path) -> np.ndarray:
    """Read a NumPy array file holding RGB pixels."""
    try:
        data = np.load(str(path))
    except (OSError, ValueError) as e:
        raise DecodeFailure(f"Cannot load array {path}: {e}") from e

    if data.ndim != 3 or data.shape[2] != 3:
        raise DecodeFailure(f"Expected (H, W, 3) array, got shape {data.shape}")

    return np.clip(data, 0, 255).astype(np.uint8)


def get_image_info(path: str) -> dict:
    """
    Get information about an image file without decoding all pixels.

    Returns:
        Dictionary with 'width', 'height', 'mode'
    """
    path = Path(path)

    if path.suffix.lower() == '.npy':
        data = np.load(str(path), mmap_mode='r')
        return {
            'width': data.shape[1],
            'height': data.shape[0],
            'mode': str(data.dtype),
        }

    try:
        with Image.open(path) as img:
            return {
                'width': img.width,
                'height': img.height,
                'mode': img.mode,
            }
    except (OSError, UnidentifiedImageError) as e:
        raise DecodeFailure(f"Cannot decode image {path}: {e}") from e
