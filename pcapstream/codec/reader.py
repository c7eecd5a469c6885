"""Sequential reader for capture files."""

import io
import logging
from typing import BinaryIO, Iterator, Optional, Tuple

from ..models.header import (
    HEADER_SIZE,
    RECORD_HEADER_SIZE,
    ByteOrder,
    FileHeader,
    RecordHeader,
)
from .byteorder import detect_byte_order
from .errors import PcapError, UnexpectedEndOfStreamError

logger = logging.getLogger(__name__)

DISCARD_CHUNK_SIZE = 64 * 1024


def _read_full(stream: BinaryIO, size: int) -> bytes:
    """Read exactly size bytes, or fewer if the stream ends first."""
    chunks = []
    received = 0
    while received < size:
        chunk = stream.read(size - received)
        if not chunk:
            break
        chunks.append(chunk)
        received += len(chunk)
    return b"".join(chunks)


class _RecordReader:
    """Reads the payload of a single record, bounded by its captured length."""

    def __init__(self, stream: BinaryIO, caplen: int):
        self._stream = stream
        self.caplen = caplen
        self.remaining = caplen

    def readinto(self, buffer) -> int:
        if self.remaining == 0:
            return 0
        view = memoryview(buffer).cast("B")
        want = min(len(view), self.remaining)
        if want == 0:
            return 0

        data = self._stream.read(want)
        if not data:
            raise UnexpectedEndOfStreamError(
                "record payload", self.caplen, self.caplen - self.remaining
            )

        n = len(data)
        view[:n] = data
        self.remaining -= n
        return n


class Reader:
    """
    Sequential access to the records of a capture file.

    The file header is parsed on construction and exposed as ``header``.
    ``next_record`` advances to the next record (including the first), after
    which ``read``/``readinto`` return that record's payload and then b""/0
    until ``next_record`` is called again.

    The stream is borrowed: the reader never closes it.
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = DISCARD_CHUNK_SIZE):
        self._stream = stream
        self._chunk_size = chunk_size
        self._err: Optional[BaseException] = None
        self._curr: Optional[_RecordReader] = None
        self._exhausted = False

        self.header, self.byte_order = self._read_header()

    def _read_header(self) -> Tuple[FileHeader, ByteOrder]:
        data = _read_full(self._stream, HEADER_SIZE)
        if len(data) < HEADER_SIZE:
            raise UnexpectedEndOfStreamError("file header", HEADER_SIZE, len(data))

        byte_order = detect_byte_order(data[:4])
        header = FileHeader.unpack(data, byte_order)
        logger.debug(
            "Parsed header: version %d.%d snaplen=%d linktype=%s",
            header.version_major,
            header.version_minor,
            header.snaplen,
            header.link_type_name,
        )
        return header, byte_order

    def _check(self) -> None:
        if self._err is not None:
            raise self._err

    def _fail(self, err: BaseException) -> None:
        logger.debug("Reader faulted: %s", err)
        self._err = err

    @property
    def remaining(self) -> int:
        """Unread payload bytes of the current record."""
        if self._curr is None:
            return 0
        return self._curr.remaining

    def next_record(self) -> Optional[RecordHeader]:
        """
        Advance to the next record and return its header.

        Unread payload of the previous record is skipped. Returns None at the
        end of the capture.
        """
        self._check()
        if self._exhausted:
            return None

        try:
            self._skip_unread()
            return self._read_record_header()
        except (PcapError, OSError) as e:
            self._fail(e)
            raise

    def _seekable(self) -> bool:
        seekable = getattr(self._stream, "seekable", None)
        if seekable is not None:
            return bool(seekable())
        return hasattr(self._stream, "seek")

    def _skip_unread(self) -> None:
        """Skip any unread bytes in the current record."""
        curr = self._curr
        self._curr = None
        if curr is None or curr.remaining == 0:
            return

        nbytes = curr.remaining
        if self._seekable():
            try:
                self._stream.seek(nbytes, io.SEEK_CUR)
                logger.debug("Skipped %d payload bytes by seeking", nbytes)
                return
            except OSError:
                logger.debug("Seek failed, discarding %d payload bytes", nbytes)

        left = nbytes
        while left > 0:
            chunk = self._stream.read(min(left, self._chunk_size))
            if not chunk:
                raise UnexpectedEndOfStreamError(
                    "record payload", curr.caplen, curr.caplen - left
                )
            left -= len(chunk)

    def _read_record_header(self) -> Optional[RecordHeader]:
        data = _read_full(self._stream, RECORD_HEADER_SIZE)
        if not data:
            self._exhausted = True
            return None
        if len(data) < RECORD_HEADER_SIZE:
            raise UnexpectedEndOfStreamError("record header", RECORD_HEADER_SIZE, len(data))

        hdr = RecordHeader.unpack(data, self.byte_order)
        self._curr = _RecordReader(self._stream, hdr.caplen)
        return hdr

    def readinto(self, buffer) -> int:
        """
        Read payload of the current record into buffer.

        Performs at most one read on the underlying stream. Returns 0 when the
        record is consumed or no record is in progress.
        """
        self._check()
        if self._curr is None:
            return 0
        try:
            return self._curr.readinto(buffer)
        except (PcapError, OSError) as e:
            self._fail(e)
            raise

    def read(self, size: int = -1) -> bytes:
        """
        Read up to size payload bytes of the current record.

        With a negative size, read the rest of the record.
        """
        if size is None or size < 0:
            out = bytearray()
            buf = bytearray(min(self.remaining, self._chunk_size) or 1)
            while True:
                n = self.readinto(buf)
                if n == 0:
                    return bytes(out)
                out += buf[:n]

        self._check()
        want = min(size, self.remaining)
        if want == 0:
            return b""
        buf = bytearray(want)
        n = self.readinto(buf)
        return bytes(buf[:n])

    def __iter__(self) -> Iterator[RecordHeader]:
        while True:
            hdr = self.next_record()
            if hdr is None:
                return
            yield hdr
