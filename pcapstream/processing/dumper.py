"""Inspection of capture file contents."""

from dataclasses import dataclass
from typing import Iterator, Optional

from ..models.header import ByteOrder, FileHeader, RecordHeader
from ..codec.reader import Reader


@dataclass
class DumpRecord:
    """One record as seen by the dump tool."""
    index: int
    header: RecordHeader
    payload: bytes = b""

    @property
    def payload_is_partial(self) -> bool:
        """Whether only a prefix of the stored payload was read."""
        return len(self.payload) < self.header.caplen


@dataclass
class CaptureSummary:
    """Aggregate view of a capture file."""
    header: FileHeader
    byte_order: ByteOrder
    record_count: int = 0
    payload_bytes: int = 0
    wire_bytes: int = 0
    truncated_records: int = 0
    first_timestamp: Optional[float] = None
    last_timestamp: Optional[float] = None

    def add(self, record: RecordHeader) -> None:
        """Account for one record."""
        self.record_count += 1
        self.payload_bytes += record.caplen
        self.wire_bytes += record.length
        if record.is_truncated:
            self.truncated_records += 1

        ts = record.timestamp
        if self.first_timestamp is None or ts < self.first_timestamp:
            self.first_timestamp = ts
        if self.last_timestamp is None or ts > self.last_timestamp:
            self.last_timestamp = ts

    @property
    def duration(self) -> float:
        if self.first_timestamp is None or self.last_timestamp is None:
            return 0.0
        return self.last_timestamp - self.first_timestamp


def _read_prefix(reader: Reader, limit: int) -> bytes:
    out = bytearray()
    while len(out) < limit:
        chunk = reader.read(limit - len(out))
        if not chunk:
            break
        out += chunk
    return bytes(out)


def iter_dump(reader: Reader, payload_limit: Optional[int] = None) -> Iterator[DumpRecord]:
    """
    Yield every record of the capture.

    With payload_limit set, only that many payload bytes are read per record
    and the rest is skipped by the reader. None reads whole payloads.
    """
    for index, record in enumerate(reader):
        if payload_limit is None:
            payload = reader.read()
        else:
            payload = _read_prefix(reader, payload_limit)
        yield DumpRecord(index=index, header=record, payload=payload)


def summarize(reader: Reader) -> CaptureSummary:
    """Walk the remaining records of reader without reading payloads."""
    summary = CaptureSummary(header=reader.header, byte_order=reader.byte_order)
    for record in reader:
        summary.add(record)
    return summary
