"""Exception types raised by the Quadtree Image Codec."""


class CodecError(Exception):
    """Base class for all codec errors."""


class InvalidDimensions(CodecError, ValueError):
    """Bitmap is not square, its side is not a power of two >= 2,
    or the buffer length does not match the side."""


class OutOfBounds(CodecError, IndexError):
    """Query point lies outside [0, rank) x [0, rank)."""


class FormatError(CodecError, ValueError):
    """Serialized streams are truncated, inconsistent or not a codec payload."""


class DecodeFailure(CodecError, OSError):
    """The image loader could not produce pixel data."""
