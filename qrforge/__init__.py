"""
qrforge - QR Code symbol encoder (ISO/IEC 18004, versions 1-40) with raster
and SVG rendering.

    >>> from qrforge import encode
    >>> grid = encode("HTTPS://EXAMPLE.COM", "M")
    >>> grid.side_length
    21
"""

from .encoder import Grid, QRCodeGenerator, encode, resolve_version
from .errors import (
    CapacityError,
    DecodeError,
    InternalConsistencyError,
    InvalidInputError,
    QRForgeError,
)
from .reader import decode, read_grid
from .tables import EC_LEVELS

__version__ = "0.1.0"

__all__ = [
    'Grid',
    'QRCodeGenerator',
    'encode',
    'resolve_version',
    'decode',
    'read_grid',
    'EC_LEVELS',
    'QRForgeError',
    'CapacityError',
    'InvalidInputError',
    'InternalConsistencyError',
    'DecodeError',
]
