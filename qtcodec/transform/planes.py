"""Channel plane utilities for square power-of-two images."""

import numpy as np
from typing import List, Sequence, Tuple

from ..errors import InvalidDimensions
from ..tree.region_tree import is_valid_rank


def as_rgb_image(pixels, rank: int = None) -> Tuple[np.ndarray, int]:
    """
    Normalise an RGB pixel buffer to a (rank, rank, 3) uint8 array.

    Args:
        pixels: (rank, rank, 3) array, or a flat row-major sequence of
            rank * rank (R, G, B) triples
        rank: Side length; inferred from a 3D array when omitted

    Returns:
        Tuple of (image array, rank)

    Raises:
        InvalidDimensions: If the buffer is not a square power-of-two image
    """
    image = np.asarray(pixels)

    if image.ndim == 3:
        h, w, c = image.shape
        if c != 3:
            raise InvalidDimensions(f"Expected 3 channels, got {c}")
        if h != w:
            raise InvalidDimensions(f"Image must be square, got {h}x{w}")
        if rank is not None and rank != h:
            raise InvalidDimensions(f"Rank {rank} does not match image side {h}")
        rank = h
    elif image.ndim == 2 and image.shape[1] == 3:
        if rank is None:
            rank = int(round(np.sqrt(image.shape[0])))
        if image.shape[0] != rank * rank:
            raise InvalidDimensions(
                f"Pixel count mismatch. Expected {rank * rank}, got {image.shape[0]}")
        image = image.reshape((rank, rank, 3))
    else:
        raise InvalidDimensions(f"Unsupported pixel buffer shape: {image.shape}")

    if not is_valid_rank(rank):
        raise InvalidDimensions(f"Image side must be a power of two >= 2, got {rank}")

    if image.size and (image.min() < 0 or image.max() > 255):
        raise ValueError("RGB samples must be in [0, 255]")

    return image.astype(np.uint8), rank


def split_planes(image: np.ndarray) -> List[np.ndarray]:
    """Split an (H, W, 3) array into three flat row-major planes."""
    return [np.ascontiguousarray(image[..., c]).ravel() for c in range(3)]


def merge_planes(planes: Sequence[np.ndarray]) -> np.ndarray:
    """Stack three (H, W) planes into an (H, W, 3) array."""
    if len(planes) != 3:
        raise ValueError(f"Expected 3 planes, got {len(planes)}")
    return np.stack(planes, axis=-1)
