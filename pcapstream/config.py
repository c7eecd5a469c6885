"""Configuration management for pcapstream."""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from pathlib import Path
import os

import yaml

from .models.header import MAX_SNAPLEN
from .codec.reader import DISCARD_CHUNK_SIZE


@dataclass
class CaptureConfig:
    """Live capture configuration."""
    interface: str = ""
    snaplen: int = MAX_SNAPLEN
    count: int = 0  # 0 = unlimited
    duration: int = 0  # 0 = continuous
    promiscuous: bool = True


@dataclass
class DumpConfig:
    """Dump output configuration."""
    show_payload: bool = False
    payload_limit: int = 64  # bytes of payload shown per record


@dataclass
class IOConfig:
    """Stream I/O configuration."""
    chunk_size: int = DISCARD_CHUNK_SIZE


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"


@dataclass
class PcapConfig:
    """Main configuration container."""
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    dump: DumpConfig = field(default_factory=DumpConfig)
    io: IOConfig = field(default_factory=IOConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PcapConfig":
        """Create config from dictionary."""
        config = cls()

        if "capture" in data:
            cap = data["capture"]
            config.capture = CaptureConfig(
                interface=cap.get("interface", ""),
                snaplen=cap.get("snaplen", MAX_SNAPLEN),
                count=cap.get("count", 0),
                duration=cap.get("duration", 0),
                promiscuous=cap.get("promiscuous", True),
            )

        if "dump" in data:
            dump = data["dump"]
            config.dump = DumpConfig(
                show_payload=dump.get("show_payload", False),
                payload_limit=dump.get("payload_limit", 64),
            )

        if "io" in data:
            config.io = IOConfig(
                chunk_size=data["io"].get("chunk_size", DISCARD_CHUNK_SIZE),
            )

        if "logging" in data:
            config.logging = LoggingConfig(
                level=str(data["logging"].get("level", "WARNING")).upper(),
            )

        return config

    @classmethod
    def from_yaml(cls, path: str) -> "PcapConfig":
        """Load config from YAML file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def load(cls, path: Optional[str] = None) -> "PcapConfig":
        """Load config from file or use defaults."""
        search_paths = [
            path,
            "pcapstream.yaml",
            os.path.expanduser("~/.config/pcapstream/config.yaml"),
            "/etc/pcapstream/config.yaml",
        ]

        for config_path in search_paths:
            if config_path and os.path.exists(config_path):
                return cls.from_yaml(config_path)

        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "capture": {
                "interface": self.capture.interface,
                "snaplen": self.capture.snaplen,
                "count": self.capture.count,
                "duration": self.capture.duration,
                "promiscuous": self.capture.promiscuous,
            },
            "dump": {
                "show_payload": self.dump.show_payload,
                "payload_limit": self.dump.payload_limit,
            },
            "io": {
                "chunk_size": self.io.chunk_size,
            },
            "logging": {
                "level": self.logging.level,
            },
        }

    def save_yaml(self, path: str) -> None:
        """Save config to YAML file."""
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)
