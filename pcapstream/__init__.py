"""
pcapstream - streaming codec for libpcap capture files

Sequential Reader and Writer for the classic pcap container, with
command-line tools to dump, copy and live-capture into capture files.
"""

__version__ = "1.0.0"
__author__ = "Network Team"

from .models import ByteOrder, FileHeader, LinkType, RecordHeader, MAGIC, MAX_SNAPLEN
from .codec import (
    PcapError,
    BadMagicError,
    UnexpectedEndOfStreamError,
    WriteTooLongError,
    WriteAfterCloseError,
    Reader,
    Writer,
)

__all__ = [
    "ByteOrder",
    "FileHeader",
    "LinkType",
    "RecordHeader",
    "MAGIC",
    "MAX_SNAPLEN",
    "PcapError",
    "BadMagicError",
    "UnexpectedEndOfStreamError",
    "WriteTooLongError",
    "WriteAfterCloseError",
    "Reader",
    "Writer",
]
