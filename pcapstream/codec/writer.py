"""Sequential writer for capture files."""

import dataclasses
import logging
from typing import BinaryIO, Optional

from ..models.header import (
    MAGIC,
    MAX_SNAPLEN,
    VERSION_MAJOR,
    VERSION_MINOR,
    ByteOrder,
    FileHeader,
    RecordHeader,
)
from .errors import WriteAfterCloseError, WriteTooLongError

logger = logging.getLogger(__name__)


class Writer:
    """
    Sequential writing of a capture file.

    Call ``write_header`` once, then for each record call
    ``write_record_header`` followed by ``write`` with at most ``caplen``
    bytes in total. Output is always little-endian.

    The stream is borrowed: ``close`` marks the writer closed but does not
    close or flush the stream.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._err: Optional[BaseException] = None
        self._remaining = 0  # unwritten bytes for the current record
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def remaining(self) -> int:
        """Payload bytes still expected for the current record."""
        return self._remaining

    def _check(self) -> None:
        if self._closed:
            raise WriteAfterCloseError()
        if self._err is not None:
            raise self._err

    def _write_all(self, data) -> int:
        """Write data to the stream, recording the first failure as sticky."""
        view = memoryview(data)
        total = 0
        try:
            while total < len(view):
                n = self._stream.write(view[total:])
                if not n:
                    raise OSError(f"short write: {total} of {len(view)} bytes")
                total += n
        except OSError as e:
            logger.debug("Writer faulted: %s", e)
            self._err = e
            raise
        return total

    def write_header(self, header: FileHeader) -> FileHeader:
        """
        Write the file header and return the header actually written.

        Magic and version are forced to their fixed values, and a zero
        snaplen is replaced with MAX_SNAPLEN. The caller's object is left
        untouched.
        """
        self._check()
        normalized = dataclasses.replace(
            header,
            magic=MAGIC,
            version_major=VERSION_MAJOR,
            version_minor=VERSION_MINOR,
            snaplen=header.snaplen or MAX_SNAPLEN,
        )
        if normalized != header:
            logger.debug("Normalized file header: %s", normalized)

        self._write_all(normalized.pack(ByteOrder.LITTLE))
        return normalized

    def write_record_header(self, record: RecordHeader) -> None:
        """Write a record header and prepare to accept its payload."""
        self._check()
        self._write_all(record.pack(ByteOrder.LITTLE))
        self._remaining = record.caplen

    def write(self, data) -> int:
        """
        Write payload for the current record.

        If data is longer than the bytes still expected, the leading part is
        written and WriteTooLongError is raised with ``written`` set.
        """
        self._check()
        view = memoryview(data).cast("B")
        overflow = len(view) > self._remaining
        if overflow:
            view = view[:self._remaining]

        n = self._write_all(view) if len(view) else 0
        self._remaining -= n
        if overflow:
            raise WriteTooLongError(n)
        return n

    def close(self) -> None:
        """Close the writer. The format has no trailer, so nothing is written."""
        if self._err is not None:
            raise self._err
        self._closed = True

    def __enter__(self) -> "Writer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        elif self._err is None:
            self._closed = True
