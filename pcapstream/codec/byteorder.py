"""Byte order detection from the file header magic."""

import logging
import struct

from ..models.header import MAGIC, ByteOrder
from .errors import BadMagicError

logger = logging.getLogger(__name__)


def detect_byte_order(magic: bytes) -> ByteOrder:
    """
    Pick the byte order under which the first 4 header bytes decode to MAGIC.

    Little-endian is tried first, then big-endian. Raises BadMagicError if
    neither matches.
    """
    if len(magic) < 4:
        raise ValueError(f"need 4 magic bytes, got {len(magic)}")

    (value,) = struct.unpack("<I", magic[:4])
    if value == MAGIC:
        order = ByteOrder.LITTLE
    else:
        (value,) = struct.unpack(">I", magic[:4])
        if value != MAGIC:
            raise BadMagicError(value)
        order = ByteOrder.BIG

    logger.debug("Detected %s-endian capture", order.name.lower())
    return order
