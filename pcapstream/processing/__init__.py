"""Capture processing built on the codec."""

from .copier import copy_capture, CopyStats
from .dumper import iter_dump, summarize, DumpRecord, CaptureSummary

__all__ = ["copy_capture", "CopyStats", "iter_dump", "summarize", "DumpRecord", "CaptureSummary"]
