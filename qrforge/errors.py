"""
Exceptions raised by the QR code encoder and reader.

Every failure is deterministic for a given input, so nothing in the package
retries. Callers that hit a CapacityError may try again with a lower error
correction level or a shorter payload.
"""


class QRForgeError(Exception):
    """Base class for all qrforge errors."""


class CapacityError(QRForgeError):
    """The payload does not fit any allowed version at the requested level."""


class InvalidInputError(QRForgeError, ValueError):
    """Unsupported payload type/characters or unknown error correction level."""


class InternalConsistencyError(QRForgeError):
    """
    Raised when the codeword stream and the symbol disagree on size.

    Seeing this means a capacity table or the placement code is wrong; the
    symbol is never emitted with truncated or padded data.
    """


class DecodeError(QRForgeError):
    """A module grid could not be read back as a valid symbol."""
