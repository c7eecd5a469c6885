"""Export of capture contents."""

from .json_exporter import JSONExporter

__all__ = ["JSONExporter"]
