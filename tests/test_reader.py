import io
import sys

import pytest

from pcapstream.codec import BadMagicError, Reader, UnexpectedEndOfStreamError
from pcapstream.models import ByteOrder, LinkType, RecordHeader

from conftest import (
    BrokenSeekStream,
    FailingReadStream,
    NonSeekableStream,
    header_bytes,
    record_bytes,
)


def test_header_is_parsed_on_open(sample_capture):
    r = Reader(io.BytesIO(sample_capture))
    assert r.byte_order is ByteOrder.LITTLE
    assert r.header.snaplen == 65535
    assert r.header.link_type == LinkType.ETHERNET
    assert (r.header.version_major, r.header.version_minor) == (2, 4)


def test_big_endian_capture_decodes_like_little_endian():
    payload = b"\x01\x02\x03\x04"
    le = header_bytes("<", snaplen=128, link_type=105) + record_bytes(payload, "<", ts_sec=5, ts_usec=6, length=90)
    be = header_bytes(">", snaplen=128, link_type=105) + record_bytes(payload, ">", ts_sec=5, ts_usec=6, length=90)

    r_le = Reader(io.BytesIO(le))
    r_be = Reader(io.BytesIO(be))
    assert r_be.byte_order is ByteOrder.BIG
    assert r_le.header == r_be.header

    assert r_le.next_record() == r_be.next_record() == RecordHeader(5, 6, 4, 90)
    assert r_le.read() == r_be.read() == payload


def test_short_header():
    with pytest.raises(UnexpectedEndOfStreamError) as exc_info:
        Reader(io.BytesIO(header_bytes()[:10]))
    assert exc_info.value.expected == 24
    assert exc_info.value.received == 10


def test_bad_magic():
    with pytest.raises(BadMagicError):
        Reader(io.BytesIO(header_bytes(magic=0x12345678)))


def test_empty_capture_is_exhausted():
    r = Reader(io.BytesIO(header_bytes()))
    assert r.read() == b""
    assert r.next_record() is None
    assert r.next_record() is None
    assert r.read(10) == b""
    assert list(r) == []


def test_iterates_records_and_payloads(sample_capture, sample_records):
    r = Reader(io.BytesIO(sample_capture))
    seen = []
    for hdr in r:
        seen.append((hdr, r.read()))
    assert seen == sample_records


def test_payload_read_is_bounded_by_caplen(sample_capture):
    r = Reader(io.BytesIO(sample_capture))
    r.next_record()
    assert r.remaining == 5
    assert r.read(3) == b"hel"
    assert r.read(100) == b"lo"
    assert r.remaining == 0
    assert r.read(100) == b""
    assert r.read() == b""


def test_read_size_larger_than_record_allocates_only_the_record(sample_capture):
    r = Reader(io.BytesIO(sample_capture))
    r.next_record()
    assert r.read(2**40) == b"hello"
    assert r.read(2**40) == b""

    r.next_record()
    r.next_record()
    assert r.read(sys.maxsize) == b"world!"


def test_readinto(sample_capture):
    r = Reader(io.BytesIO(sample_capture))
    buf = bytearray(4)
    assert r.readinto(buf) == 0
    r.next_record()
    assert r.readinto(buf) == 4
    assert bytes(buf) == b"hell"
    assert r.readinto(memoryview(buf)[1:]) == 1
    assert buf[1:2] == b"o"
    assert r.readinto(buf) == 0


@pytest.mark.parametrize("make_stream", [io.BytesIO, NonSeekableStream, BrokenSeekStream])
def test_next_record_skips_unread_payload(make_stream, sample_capture, sample_records):
    r = Reader(make_stream(sample_capture))

    assert r.next_record() == sample_records[0][0]
    assert r.read(2) == b"he"

    assert r.next_record() == sample_records[1][0]
    assert r.next_record() == sample_records[2][0]
    assert r.read() == b"world!"
    assert r.next_record() is None


def test_skip_without_reading_anything(sample_capture, sample_records):
    r = Reader(NonSeekableStream(sample_capture))
    headers = list(r)
    assert headers == [hdr for hdr, _ in sample_records]


def test_truncated_payload_is_not_a_clean_end():
    data = header_bytes() + record_bytes(b"x" * 40, caplen=100)
    r = Reader(io.BytesIO(data))

    assert r.next_record().caplen == 100
    assert r.read(20) == b"x" * 20
    assert r.read(20) == b"x" * 20
    with pytest.raises(UnexpectedEndOfStreamError) as exc_info:
        r.read(20)
    assert exc_info.value.expected == 100
    assert exc_info.value.received == 40


def test_errors_are_sticky():
    data = header_bytes() + record_bytes(b"x" * 10, caplen=50)
    r = Reader(io.BytesIO(data))
    r.next_record()
    r.read(10)
    with pytest.raises(UnexpectedEndOfStreamError) as exc_info:
        r.read(10)

    err = exc_info.value
    for op in (r.next_record, r.read, lambda: r.readinto(bytearray(1))):
        with pytest.raises(UnexpectedEndOfStreamError) as again:
            op()
        assert again.value is err


def test_truncated_record_header():
    r = Reader(io.BytesIO(header_bytes() + b"\x00" * 10))
    with pytest.raises(UnexpectedEndOfStreamError) as exc_info:
        r.next_record()
    assert exc_info.value.received == 10
    with pytest.raises(UnexpectedEndOfStreamError):
        r.next_record()


def test_skipping_truncated_payload_on_forward_only_stream():
    data = header_bytes() + record_bytes(b"x" * 10, caplen=50)
    r = Reader(NonSeekableStream(data))
    r.next_record()
    with pytest.raises(UnexpectedEndOfStreamError):
        r.next_record()


def test_os_error_is_propagated_and_sticky():
    data = header_bytes() + record_bytes(b"abcdef")
    r = Reader(FailingReadStream(data, fail_at=40))
    r.next_record()
    with pytest.raises(OSError) as exc_info:
        r.read()
    with pytest.raises(OSError) as again:
        r.next_record()
    assert again.value is exc_info.value


def test_reader_does_not_close_stream(sample_capture):
    stream = io.BytesIO(sample_capture)
    r = Reader(stream)
    list(r)
    assert not stream.closed
