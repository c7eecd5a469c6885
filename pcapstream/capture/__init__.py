"""Live packet capture into capture files."""

from .interface_manager import InterfaceManager, InterfaceInfo
from .live import LiveCapture, CaptureStats

__all__ = [
    "InterfaceManager",
    "InterfaceInfo",
    "LiveCapture",
    "CaptureStats",
]
