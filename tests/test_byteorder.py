import struct

import pytest

from pcapstream.codec import BadMagicError, detect_byte_order
from pcapstream.models import MAGIC, ByteOrder


def test_little_endian_magic():
    assert detect_byte_order(struct.pack("<I", MAGIC)) is ByteOrder.LITTLE


def test_big_endian_magic():
    assert detect_byte_order(b"\xa1\xb2\xc3\xd4") is ByteOrder.BIG


def test_bad_magic():
    with pytest.raises(BadMagicError) as exc_info:
        detect_byte_order(b"\x00\x01\x02\x03")
    assert exc_info.value.magic == 0x00010203
    assert isinstance(exc_info.value, ValueError)


def test_needs_four_bytes():
    with pytest.raises(ValueError):
        detect_byte_order(b"\xd4\xc3")
