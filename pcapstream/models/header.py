"""Capture file header data structures."""

import struct
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


MAGIC = 0xA1B2C3D4
VERSION_MAJOR = 2
VERSION_MINOR = 4
MAX_SNAPLEN = 65535

_HEADER_FMT = "IHHiIII"
_RECORD_FMT = "IIII"

HEADER_SIZE = struct.calcsize("<" + _HEADER_FMT)
RECORD_HEADER_SIZE = struct.calcsize("<" + _RECORD_FMT)


class ByteOrder(Enum):
    """Byte order of a capture stream, as a struct format prefix."""
    LITTLE = "<"
    BIG = ">"


class LinkType(IntEnum):
    """Data link types."""
    NULL = 0
    ETHERNET = 1
    RAW = 101
    IEEE802_11 = 105
    LOOP = 108
    LINUX_SLL = 113


def link_type_name(value: int) -> str:
    """Return the symbolic name of a link type, or the number if unknown."""
    try:
        return LinkType(value).name
    except ValueError:
        return str(value)


@dataclass
class FileHeader:
    """Global header at the start of a capture file."""
    magic: int = MAGIC
    version_major: int = VERSION_MAJOR
    version_minor: int = VERSION_MINOR
    this_zone: int = 0  # GMT to local correction
    sig_figs: int = 0  # accuracy of timestamps
    snaplen: int = 0
    link_type: int = LinkType.ETHERNET

    def pack(self, byte_order: ByteOrder = ByteOrder.LITTLE) -> bytes:
        """Serialize to the 24-byte wire form."""
        try:
            return struct.pack(
                byte_order.value + _HEADER_FMT,
                self.magic,
                self.version_major,
                self.version_minor,
                self.this_zone,
                self.sig_figs,
                self.snaplen,
                self.link_type,
            )
        except struct.error as e:
            raise ValueError(f"file header field out of range: {e}") from e

    @classmethod
    def unpack(cls, data: bytes, byte_order: ByteOrder) -> "FileHeader":
        """Decode a 24-byte header."""
        return cls(*struct.unpack(byte_order.value + _HEADER_FMT, data[:HEADER_SIZE]))

    @property
    def link_type_name(self) -> str:
        return link_type_name(self.link_type)


@dataclass
class RecordHeader:
    """Per-record header preceding each captured payload."""
    ts_sec: int = 0
    ts_usec: int = 0
    caplen: int = 0  # bytes stored in the file
    length: int = 0  # bytes on the wire

    @classmethod
    def from_timestamp(
        cls, ts: float, caplen: int, length: Optional[int] = None
    ) -> "RecordHeader":
        """Build a record header from a float UNIX timestamp."""
        sec = int(ts)
        usec = int(round((ts - sec) * 1_000_000))
        if usec >= 1_000_000:
            sec += 1
            usec -= 1_000_000
        return cls(
            ts_sec=sec,
            ts_usec=usec,
            caplen=caplen,
            length=caplen if length is None else length,
        )

    @property
    def timestamp(self) -> float:
        """Timestamp as float seconds."""
        return self.ts_sec + self.ts_usec / 1_000_000

    @property
    def is_truncated(self) -> bool:
        """Whether the packet was cut to fit the snapshot length."""
        return self.caplen < self.length

    def pack(self, byte_order: ByteOrder = ByteOrder.LITTLE) -> bytes:
        """Serialize to the 16-byte wire form."""
        try:
            return struct.pack(
                byte_order.value + _RECORD_FMT,
                self.ts_sec,
                self.ts_usec,
                self.caplen,
                self.length,
            )
        except struct.error as e:
            raise ValueError(f"record header field out of range: {e}") from e

    @classmethod
    def unpack(cls, data: bytes, byte_order: ByteOrder) -> "RecordHeader":
        """Decode a 16-byte record header."""
        return cls(*struct.unpack(byte_order.value + _RECORD_FMT, data[:RECORD_HEADER_SIZE]))
