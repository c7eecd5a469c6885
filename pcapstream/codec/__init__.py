"""Capture file codec."""

from .errors import (
    PcapError,
    BadMagicError,
    UnexpectedEndOfStreamError,
    WriteTooLongError,
    WriteAfterCloseError,
)
from .byteorder import detect_byte_order
from .reader import Reader
from .writer import Writer

__all__ = [
    "PcapError",
    "BadMagicError",
    "UnexpectedEndOfStreamError",
    "WriteTooLongError",
    "WriteAfterCloseError",
    "detect_byte_order",
    "Reader",
    "Writer",
]
