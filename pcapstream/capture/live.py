"""Live capture of network frames into a capture file using Scapy."""

import logging
import os
import time
from dataclasses import dataclass
from typing import List, Optional

from scapy.all import AsyncSniffer, conf
from scapy.error import Scapy_Exception

from ..models.header import MAX_SNAPLEN, FileHeader, LinkType, RecordHeader
from ..codec.errors import PcapError
from ..codec.writer import Writer
from .interface_manager import InterfaceManager

logger = logging.getLogger(__name__)


@dataclass
class CaptureStats:
    """Statistics for a live capture."""
    packets_written: int = 0
    bytes_written: int = 0
    packets_truncated: int = 0
    start_time: float = 0.0
    end_time: float = 0.0

    @property
    def duration(self) -> float:
        if self.start_time == 0:
            return 0.0
        end = self.end_time or time.time()
        return end - self.start_time

    @property
    def packets_per_second(self) -> float:
        if self.duration == 0:
            return 0.0
        return self.packets_written / self.duration


class LiveCapture:
    """
    Writes frames sniffed on one interface to a capture Writer.

    Frames are not decoded: each one becomes a record whose payload is the raw
    link-layer bytes, cut to the snapshot length. The file header declares
    Ethernet framing.
    """

    def __init__(
        self,
        writer: Writer,
        interface: str,
        snaplen: int = MAX_SNAPLEN,
        promiscuous: bool = True,
        interface_manager: Optional[InterfaceManager] = None,
        poll_interval: float = 0.2,
    ):
        self.writer = writer
        self.interface = interface
        self.snaplen = snaplen or MAX_SNAPLEN
        self.promiscuous = promiscuous
        self._interfaces = interface_manager
        self.poll_interval = poll_interval
        self._sniffer: Optional[AsyncSniffer] = None

        self.header: Optional[FileHeader] = None
        self._stats = CaptureStats()
        self._stop_requested = False
        self._error: Optional[BaseException] = None

    def check_ready(self) -> List[str]:
        """
        Check if capture can start.
        Returns list of issues, empty if ready.
        """
        issues = []

        if hasattr(os, "geteuid") and os.geteuid() != 0:
            issues.append("Insufficient privileges. Run with sudo/administrator rights.")

        mgr = self._interfaces or InterfaceManager()
        if not mgr.exists(self.interface):
            issues.append(f"Invalid interface: {self.interface}")

        return issues

    def write_file_header(self) -> FileHeader:
        """Write the file header once."""
        if self.header is None:
            self.header = self.writer.write_header(
                FileHeader(snaplen=self.snaplen, link_type=LinkType.ETHERNET)
            )
        return self.header

    def write_frame(self, data: bytes, ts: Optional[float] = None) -> RecordHeader:
        """Append one frame as a record."""
        if ts is None:
            ts = time.time()
        caplen = min(len(data), self.snaplen)
        record = RecordHeader.from_timestamp(ts, caplen, len(data))

        self.writer.write_record_header(record)
        self.writer.write(data[:caplen])

        self._stats.packets_written += 1
        self._stats.bytes_written += caplen
        if record.is_truncated:
            self._stats.packets_truncated += 1
        return record

    def _on_packet(self, pkt) -> None:
        if self._stop_requested:
            return
        try:
            self.write_frame(bytes(pkt), float(pkt.time))
        except (PcapError, OSError) as e:
            self._error = e
            self._stop_requested = True

    def run(self, count: int = 0, duration: int = 0) -> CaptureStats:
        """
        Capture until count frames were written, duration seconds elapsed,
        or stop() is called. 0 means no limit.

        Frames are sniffed on a background thread while the calling thread
        polls for a stop request, so stop() takes effect on an idle link too.
        Writer failures stop the capture and are re-raised.
        """
        self.write_file_header()

        conf.verb = 0
        self._stop_requested = False
        self._stats.start_time = time.time()
        logger.debug("Capturing on %s (snaplen=%d)", self.interface, self.snaplen)

        self._sniffer = AsyncSniffer(
            iface=self.interface,
            prn=self._on_packet,
            store=False,
            count=count,
            timeout=duration or None,
            promisc=self.promiscuous,
            stop_filter=lambda _: self._stop_requested,
        )
        self._sniffer.start()

        try:
            while self._sniffer.running:
                if self._stop_requested:
                    self._halt_sniffer()
                    break
                try:
                    time.sleep(self.poll_interval)
                except KeyboardInterrupt:
                    self.stop()
            self._sniffer.join()
        finally:
            self._stats.end_time = time.time()

        if self._error is not None:
            raise self._error
        return self._stats

    def _halt_sniffer(self) -> None:
        try:
            self._sniffer.stop()
        except Scapy_Exception:
            # finished on its own between the running check and stop()
            logger.debug("Sniffer on %s already stopped", self.interface)

    def stop(self) -> None:
        """Request the capture to stop. Safe to call from a signal handler."""
        self._stop_requested = True

    def get_stats(self) -> CaptureStats:
        return self._stats
