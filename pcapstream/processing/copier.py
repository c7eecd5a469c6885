"""Record-by-record copy of a capture stream."""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Callable, Optional

from ..models.header import FileHeader, RecordHeader
from ..codec.reader import DISCARD_CHUNK_SIZE, Reader
from ..codec.writer import Writer

logger = logging.getLogger(__name__)


@dataclass
class CopyStats:
    """Statistics for a capture copy."""
    records: int = 0
    payload_bytes: int = 0
    truncated_records: int = 0
    header: Optional[FileHeader] = None


def copy_capture(
    src: BinaryIO,
    dst: BinaryIO,
    chunk_size: int = DISCARD_CHUNK_SIZE,
    on_record: Optional[Callable[[RecordHeader], None]] = None,
) -> CopyStats:
    """
    Copy every record of the capture in src to dst.

    The header is re-written through Writer.write_header, so the output is
    always little-endian. Payloads are streamed in chunks of chunk_size.
    Neither stream is closed.
    """
    reader = Reader(src, chunk_size=chunk_size)
    writer = Writer(dst)
    stats = CopyStats()

    stats.header = writer.write_header(reader.header)
    buf = bytearray(chunk_size)
    view = memoryview(buf)

    for record in reader:
        if on_record is not None:
            on_record(record)

        writer.write_record_header(record)
        while True:
            n = reader.readinto(buf)
            if n == 0:
                break
            writer.write(view[:n])
            stats.payload_bytes += n

        stats.records += 1
        if record.is_truncated:
            stats.truncated_records += 1

    writer.close()
    logger.debug("Copied %d records (%d payload bytes)", stats.records, stats.payload_bytes)
    return stats
