"""Shared fixtures and stream doubles for the codec tests."""

import io
import struct

import pytest

from pcapstream.models.header import MAGIC, RecordHeader


def header_bytes(order="<", snaplen=65535, link_type=1, magic=MAGIC, this_zone=0, sig_figs=0):
    return struct.pack(order + "IHHiIII", magic, 2, 4, this_zone, sig_figs, snaplen, link_type)


def record_bytes(payload, order="<", ts_sec=0, ts_usec=0, caplen=None, length=None):
    caplen = len(payload) if caplen is None else caplen
    length = caplen if length is None else length
    return struct.pack(order + "IIII", ts_sec, ts_usec, caplen, length) + payload


class NonSeekableStream(io.RawIOBase):
    """Forward-only byte stream."""

    def __init__(self, data: bytes):
        self._buf = io.BytesIO(data)

    def readable(self):
        return True

    def seekable(self):
        return False

    def readinto(self, b):
        data = self._buf.read(len(b))
        b[:len(data)] = data
        return len(data)

    def position(self):
        return self._buf.tell()


class BrokenSeekStream(io.BytesIO):
    """Claims to be seekable but every relative seek fails."""

    def seek(self, offset, whence=io.SEEK_SET):
        if whence == io.SEEK_CUR:
            raise OSError("illegal seek")
        return super().seek(offset, whence)


class FailingReadStream(io.BytesIO):
    """Raises OSError on any read starting at or beyond fail_at."""

    def __init__(self, data: bytes, fail_at: int):
        super().__init__(data)
        self.fail_at = fail_at

    def read(self, size=-1):
        if self.tell() >= self.fail_at:
            raise OSError("device error")
        return super().read(size)


class RecordingStream(io.RawIOBase):
    """Write sink that records each write and can fail after a number of them."""

    def __init__(self, fail_after=None, short=False):
        self.data = bytearray()
        self.writes = 0
        self.fail_after = fail_after
        self.short = short

    def writable(self):
        return True

    def write(self, b):
        if self.fail_after is not None and self.writes >= self.fail_after:
            raise OSError("disk full")
        self.writes += 1
        if self.short:
            return 0
        self.data += bytes(b)
        return len(b)


@pytest.fixture
def sample_records():
    return [
        (RecordHeader(ts_sec=1, ts_usec=10, caplen=5, length=5), b"hello"),
        (RecordHeader(ts_sec=2, ts_usec=20, caplen=0, length=60), b""),
        (RecordHeader(ts_sec=3, ts_usec=30, caplen=6, length=1514), b"world!"),
    ]


@pytest.fixture
def sample_capture(sample_records):
    """Little-endian capture bytes for sample_records."""
    out = header_bytes()
    for hdr, payload in sample_records:
        out += record_bytes(payload, ts_sec=hdr.ts_sec, ts_usec=hdr.ts_usec, length=hdr.length)
    return out
