"""Command-line interface for pcapstream."""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from . import __version__
from .config import PcapConfig
from .models.header import FileHeader, RecordHeader
from .codec.errors import PcapError
from .codec.reader import Reader
from .codec.writer import Writer
from .capture.interface_manager import InterfaceManager
from .processing.copier import copy_capture
from .processing.dumper import CaptureSummary, iter_dump, summarize
from .export.json_exporter import JSONExporter


console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("pcapstream")


def setup_logging(level: str) -> None:
    """Route library logging to stderr through rich."""
    handler = RichHandler(console=err_console, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(level.upper())
    logger.propagate = False


def header_panel(header: FileHeader, byte_order_name: str = "little") -> Panel:
    """Render a file header."""
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")

    table.add_row("Magic", f"0x{header.magic:08x}")
    table.add_row("Byte order", byte_order_name)
    table.add_row("Version", f"{header.version_major}.{header.version_minor}")
    table.add_row("ThisZone", str(header.this_zone))
    table.add_row("SigFigs", str(header.sig_figs))
    table.add_row("SnapLen", str(header.snaplen))
    table.add_row("LinkType", f"{header.link_type} ({header.link_type_name})")

    return Panel(table, title="Header", border_style="cyan")


def summary_table(summary: CaptureSummary) -> Table:
    """Render aggregate capture statistics."""
    table = Table(title="Capture Summary", box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Records", f"{summary.record_count:,}")
    table.add_row("Payload bytes", f"{summary.payload_bytes:,}")
    table.add_row("Wire bytes", f"{summary.wire_bytes:,}")
    truncated_style = "yellow" if summary.truncated_records else "green"
    table.add_row("Truncated", Text(f"{summary.truncated_records:,}", style=truncated_style))
    table.add_row("Duration", f"{summary.duration:.6f}s")
    return table


def record_line(record: RecordHeader) -> str:
    return (
        f"{record.ts_sec}.{record.ts_usec:06d} "
        f"caplen={record.caplen} len={record.length}"
    )


def run_list(args, config: PcapConfig) -> None:
    """List available network interfaces."""
    mgr = InterfaceManager()

    table = Table(title="Available Network Interfaces", box=box.ROUNDED)
    table.add_column("Interface", style="bold cyan")
    table.add_column("IP Address")
    table.add_column("MAC Address")
    table.add_column("MTU", justify="right")
    table.add_column("Speed", justify="right")
    table.add_column("Status")

    for info in mgr.get_all():
        status = "UP" if info.is_up else "DOWN"
        status_style = "green" if info.is_up else "red"

        table.add_row(
            info.name,
            info.ipv4_address or "N/A",
            info.mac_address or "N/A",
            str(info.mtu) if info.mtu else "N/A",
            f"{info.speed_mbps} Mbps" if info.speed_mbps else "N/A",
            Text(status, style=status_style),
        )

    console.print(table)


def run_dump(args, config: PcapConfig) -> None:
    """Dump header and records of a capture file."""
    show_payload = args.payload or config.dump.show_payload
    limit = args.limit if args.limit is not None else config.dump.payload_limit

    with open(args.file, "rb") as f:
        reader = Reader(f, chunk_size=config.io.chunk_size)
        console.print(header_panel(reader.header, reader.byte_order.name.lower()))

        if not args.verbose and not args.json:
            console.print(summary_table(summarize(reader)))
            return

        summary = CaptureSummary(header=reader.header, byte_order=reader.byte_order)
        records = []

        table = Table(title="Records", box=box.SIMPLE, header_style="bold cyan")
        table.add_column("#", justify="right")
        table.add_column("Timestamp")
        table.add_column("CapLen", justify="right")
        table.add_column("Len", justify="right")
        if show_payload:
            table.add_column("Payload")

        payload_limit = limit if (show_payload or args.json) else 0
        for item in iter_dump(reader, payload_limit=payload_limit):
            summary.add(item.header)
            if args.json:
                records.append(item)
            if args.verbose:
                row = [
                    str(item.index),
                    f"{item.header.ts_sec}.{item.header.ts_usec:06d}",
                    str(item.header.caplen),
                    str(item.header.length),
                ]
                if show_payload:
                    suffix = "..." if item.payload_is_partial else ""
                    row.append(item.payload.hex() + suffix)
                table.add_row(*row)

    if args.verbose:
        console.print(table)
    console.print(summary_table(summary))

    if args.json:
        out = Path(args.json)
        exporter = JSONExporter(output_dir=str(out.parent))
        path = exporter.export_dump(summary, records, filename=out.name)
        console.print(f"[green]JSON written to {path}[/green]")


def run_copy(args, config: PcapConfig) -> None:
    """Copy a capture file record by record."""

    def on_record(record: RecordHeader) -> None:
        console.print(f"[dim]{record_line(record)}[/dim]")

    with open(args.src, "rb") as src, open(args.dst, "wb") as dst:
        stats = copy_capture(
            src,
            dst,
            chunk_size=config.io.chunk_size,
            on_record=on_record if args.verbose else None,
        )

    if args.verbose and stats.header is not None:
        console.print(header_panel(stats.header))
    console.print(
        f"[green]Copied {stats.records:,} records "
        f"({stats.payload_bytes:,} payload bytes) to {args.dst}[/green]"
    )


def run_live(args, config: PcapConfig) -> None:
    """Capture frames from an interface into a capture file."""
    from .capture.live import LiveCapture

    interface = args.interface or config.capture.interface
    if not interface:
        active = InterfaceManager().get_active()
        if not active:
            err_console.print("[red]No active interfaces found. Specify with --interface[/red]")
            sys.exit(1)
        interface = active[0].name
        console.print(f"[yellow]Auto-detected interface: {interface}[/yellow]")

    count = args.count if args.count is not None else config.capture.count
    duration = args.duration if args.duration is not None else config.capture.duration
    snaplen = args.snaplen if args.snaplen is not None else config.capture.snaplen

    with open(args.file, "wb") as f:
        writer = Writer(f)
        capture = LiveCapture(
            writer,
            interface,
            snaplen=snaplen,
            promiscuous=config.capture.promiscuous,
        )

        issues = capture.check_ready()
        if issues:
            err_console.print("[red]Cannot start capture:[/red]")
            for issue in issues:
                err_console.print(f"  - {issue}")
            sys.exit(1)

        def signal_handler(sig, frame):
            console.print("\n[yellow]Stopping capture...[/yellow]")
            capture.stop()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        console.print(f"[green]Capturing on {interface} into {args.file}[/green]")
        stats = capture.run(count=count, duration=duration)
        writer.close()

    console.print(
        f"[cyan]Packets: {stats.packets_written:,} | "
        f"Bytes: {stats.bytes_written:,} | "
        f"Truncated: {stats.packets_truncated:,} | "
        f"Rate: {stats.packets_per_second:.1f} pps[/cyan]"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pcapstream",
        description="Read, write and inspect pcap capture files.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", help="Path to configuration file")
    parser.add_argument("--log-level", help="Logging level (e.g. DEBUG, INFO)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("list", help="List available network interfaces")

    dump_parser = subparsers.add_parser("dump", help="Show the contents of a capture file")
    dump_parser.add_argument("file", help="Capture file to read")
    dump_parser.add_argument("-v", "--verbose", action="store_true", help="List every record")
    dump_parser.add_argument("--payload", action="store_true", help="Show payload bytes in hex")
    dump_parser.add_argument(
        "--limit",
        type=int,
        help="Payload bytes shown per record (default from config: 64)",
    )
    dump_parser.add_argument("--json", metavar="OUT", help="Also write the dump as JSON to OUT")

    copy_parser = subparsers.add_parser("copy", help="Copy a capture file record by record")
    copy_parser.add_argument("src", help="Input capture file")
    copy_parser.add_argument("dst", help="Output capture file")
    copy_parser.add_argument("-v", "--verbose", action="store_true", help="Print each record")

    live_parser = subparsers.add_parser("live", help="Capture live traffic into a capture file")
    live_parser.add_argument("file", help="Output capture file")
    live_parser.add_argument("-i", "--interface", help="Interface to capture on")
    live_parser.add_argument("-n", "--count", type=int, help="Stop after N frames (0 = unlimited)")
    live_parser.add_argument(
        "-d", "--duration",
        type=int,
        help="Capture duration in seconds (0 = continuous)",
    )
    live_parser.add_argument("-s", "--snaplen", type=int, help="Snapshot length")

    return parser


COMMANDS = {
    "list": run_list,
    "dump": run_dump,
    "copy": run_copy,
    "live": run_live,
}


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return

    config = PcapConfig.load(args.config)
    setup_logging(args.log_level or config.logging.level)

    try:
        handler(args, config)
    except (PcapError, OSError) as e:
        err_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
