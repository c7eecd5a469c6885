"""Capture codec errors."""


class PcapError(Exception):
    """Base class for capture codec errors."""


class BadMagicError(PcapError, ValueError):
    """File header magic matches neither byte order."""

    def __init__(self, magic: int):
        self.magic = magic
        super().__init__(f"pcap: bad magic number 0x{magic:08x}")


class UnexpectedEndOfStreamError(PcapError, EOFError):
    """Stream ended inside a header or a record payload."""

    def __init__(self, what: str, expected: int, received: int):
        self.expected = expected
        self.received = received
        super().__init__(
            f"pcap: unexpected end of stream in {what} "
            f"({received} of {expected} bytes)"
        )


class WriteTooLongError(PcapError):
    """More payload was supplied than the record header declared."""

    def __init__(self, written: int):
        self.written = written
        super().__init__("pcap: write too long")


class WriteAfterCloseError(PcapError):
    """Write attempted on a closed writer."""

    def __init__(self):
        super().__init__("pcap: write after close")
