"""RGB image writer supporting Pillow formats and NumPy arrays."""

import numpy as np
from pathlib import Path
from PIL import Image


def write_rgb_image(image: np.ndarray, path: str, format: str = None) -> None:
    """
    Write an RGB image to file.

    Args:
        image: (H, W, 3) uint8 array
        path: Output file path
        format: 'npy', or a Pillow format name ('png', 'bmp', ...).
            Auto-detected from extension if None; defaults to PNG.

    Raises:
        ValueError: If the array is not an RGB image
    """
    path = Path(path)

    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected (H, W, 3) array, got shape {image.shape}")

    # Auto-detect format from extension
    if format is None:
        suffix = path.suffix.lower().lstrip('.')
        if suffix:
            format = suffix
        else:
            format = 'png'
            path = path.with_suffix('.png')

    if format == 'npy':
        _write_numpy(image, path)
    else:
        _write_pillow(image, path, format)


def _write_numpy(image: np.ndarray, path: Path) -> None:
    np.save(str(path), image)


def _write_pillow(image: np.ndarray, path: Path, format: str) -> None:
    """Write image through Pillow; 'jpg' is accepted as an alias for JPEG."""
    pil_format = 'JPEG' if format in ('jpg', 'jpeg') else format.upper()
    Image.fromarray(image.astype(np.uint8)).save(str(path), format=pil_format)
