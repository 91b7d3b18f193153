"""Fixed YCbCr colour transform used to decouple brightness from colour."""

import numpy as np

from ..constants import YCBCR_FORWARD, YCBCR_INVERSE, CHROMA_OFFSET, MAX_SAMPLE

_FORWARD = np.array(YCBCR_FORWARD, dtype=np.float64)
_INVERSE = np.array(YCBCR_INVERSE, dtype=np.float64)
_OFFSET = np.array([0.0, CHROMA_OFFSET, CHROMA_OFFSET])


def rgb_to_ycbcr(rgb: np.ndarray) -> np.ndarray:
    """
    Convert RGB samples to YCbCr.

    Y  =  0.299 R + 0.587 G + 0.114 B
    Cb = -0.169 R - 0.331 G + 0.501 B + 128
    Cr =  0.500 R - 0.419 G - 0.081 B + 128

    Args:
        rgb: Array whose last axis holds (R, G, B)

    Returns:
        float64 array of the same shape holding (Y, Cb, Cr), clamped to [0, 255]
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    if rgb.shape[-1] != 3:
        raise ValueError(f"Expected 3 channels in last axis, got {rgb.shape[-1]}")

    ycbcr = rgb @ _FORWARD.T + _OFFSET
    return np.clip(ycbcr, 0, MAX_SAMPLE)


def ycbcr_to_rgb(ycbcr: np.ndarray) -> np.ndarray:
    """
    Convert YCbCr samples back to RGB.

    R = Y + 1.402 (Cr - 128)
    G = Y - 0.344 (Cb - 128) - 0.714 (Cr - 128)
    B = Y + 1.772 (Cb - 128)

    Args:
        ycbcr: Array whose last axis holds (Y, Cb, Cr)

    Returns:
        uint8 array of (R, G, B), rounded and clamped to [0, 255]
    """
    ycbcr = np.asarray(ycbcr, dtype=np.float64)
    if ycbcr.shape[-1] != 3:
        raise ValueError(f"Expected 3 channels in last axis, got {ycbcr.shape[-1]}")

    rgb = (ycbcr - _OFFSET) @ _INVERSE.T
    return to_bytes(rgb)


def to_bytes(values: np.ndarray) -> np.ndarray:
    """Round and clamp samples to uint8."""
    return np.clip(np.round(values), 0, MAX_SAMPLE).astype(np.uint8)
