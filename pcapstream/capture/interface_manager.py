"""Network interface enumeration for live capture."""

import socket
from dataclasses import dataclass
from typing import List, Optional, Dict

import psutil


@dataclass
class InterfaceInfo:
    """Information about a network interface."""
    name: str
    mac_address: Optional[str]
    ipv4_address: Optional[str]
    is_up: bool
    is_loopback: bool
    speed_mbps: Optional[int]
    mtu: Optional[int]


class InterfaceManager:
    """Enumerates the interfaces a live capture can bind to."""

    def __init__(self):
        self._interfaces: Dict[str, InterfaceInfo] = {}
        self.refresh()

    def refresh(self) -> None:
        """Refresh the list of network interfaces."""
        self._interfaces.clear()

        stats = psutil.net_if_stats()
        addrs = psutil.net_if_addrs()

        for name, stat in stats.items():
            ipv4_addr = None
            mac_addr = None

            for addr in addrs.get(name, []):
                if addr.family == socket.AF_INET:
                    ipv4_addr = addr.address
                elif addr.family == psutil.AF_LINK:
                    mac_addr = addr.address

            is_loopback = name.lower().startswith("lo") or ipv4_addr == "127.0.0.1"

            self._interfaces[name] = InterfaceInfo(
                name=name,
                mac_address=mac_addr,
                ipv4_address=ipv4_addr,
                is_up=stat.isup,
                is_loopback=is_loopback,
                speed_mbps=stat.speed if stat.speed > 0 else None,
                mtu=stat.mtu or None,
            )

    def get_all(self) -> List[InterfaceInfo]:
        """Get all network interfaces."""
        return list(self._interfaces.values())

    def get_active(self) -> List[InterfaceInfo]:
        """Get only active (UP) non-loopback interfaces."""
        return [
            iface for iface in self._interfaces.values()
            if iface.is_up and not iface.is_loopback
        ]

    def exists(self, name: str) -> bool:
        """Check if interface exists."""
        return name in self._interfaces
