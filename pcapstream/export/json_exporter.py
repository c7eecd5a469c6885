"""JSON export of capture file contents."""

import json
from datetime import datetime
from typing import Dict, List, Any, Optional
from pathlib import Path

from ..processing.dumper import CaptureSummary, DumpRecord


class JSONExporter:
    """Export dumped capture contents to JSON format."""

    def __init__(self, output_dir: str = "."):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def summary_to_dict(summary: CaptureSummary) -> Dict[str, Any]:
        h = summary.header
        return {
            "header": {
                "magic": f"0x{h.magic:08x}",
                "version_major": h.version_major,
                "version_minor": h.version_minor,
                "this_zone": h.this_zone,
                "sig_figs": h.sig_figs,
                "snaplen": h.snaplen,
                "link_type": int(h.link_type),
                "link_type_name": h.link_type_name,
            },
            "byte_order": summary.byte_order.name.lower(),
            "record_count": summary.record_count,
            "payload_bytes": summary.payload_bytes,
            "wire_bytes": summary.wire_bytes,
            "truncated_records": summary.truncated_records,
            "first_timestamp": summary.first_timestamp,
            "last_timestamp": summary.last_timestamp,
            "duration": summary.duration,
        }

    @staticmethod
    def record_to_dict(record: DumpRecord) -> Dict[str, Any]:
        r = record.header
        return {
            "index": record.index,
            "ts_sec": r.ts_sec,
            "ts_usec": r.ts_usec,
            "caplen": r.caplen,
            "length": r.length,
            "payload": record.payload.hex(),
            "payload_partial": record.payload_is_partial,
        }

    def export_dump(
        self,
        summary: CaptureSummary,
        records: List[DumpRecord],
        filename: Optional[str] = None
    ) -> str:
        """Export a capture summary and its records to JSON."""
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"dump_{timestamp}.json"

        data = {
            "export_time": datetime.now().isoformat(),
            "capture": self.summary_to_dict(summary),
            "records": [self.record_to_dict(r) for r in records],
        }

        filepath = self.output_dir / filename
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2)

        return str(filepath)
