"""Data models for capture files."""

from .header import (
    MAGIC,
    VERSION_MAJOR,
    VERSION_MINOR,
    MAX_SNAPLEN,
    HEADER_SIZE,
    RECORD_HEADER_SIZE,
    ByteOrder,
    LinkType,
    FileHeader,
    RecordHeader,
    link_type_name,
)

__all__ = [
    "MAGIC",
    "VERSION_MAJOR",
    "VERSION_MINOR",
    "MAX_SNAPLEN",
    "HEADER_SIZE",
    "RECORD_HEADER_SIZE",
    "ByteOrder",
    "LinkType",
    "FileHeader",
    "RecordHeader",
    "link_type_name",
]
