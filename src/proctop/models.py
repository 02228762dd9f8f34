"""Data models for proctop."""

from dataclasses import dataclass

UNKNOWN_OWNER = "unknown"
MISSING_PATH = ""


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Raw process record as returned by a snapshot source."""

    pid: int
    name: str
    path: str | None = None
    owner_uid: int | None = None
    cpu_percent: float = 0.0


@dataclass(slots=True, frozen=True)
class ProcessRow:
    """Immutable table row for a single process in one snapshot."""

    pid: int
    name: str
    path: str
    owner: str
    cpu_percent: float = 0.0


@dataclass(slots=True, frozen=True)
class DiskUsage:
    """Space used on one mounted file system."""

    device: str
    mountpoint: str
    fstype: str
    total: int  # Bytes
    used: int


@dataclass(slots=True, frozen=True)
class NetworkInterface:
    """Traffic counters of one network interface since boot."""

    name: str
    bytes_recv: int
    bytes_sent: int


@dataclass(slots=True, frozen=True)
class Temperature:
    """One hardware sensor reading."""

    label: str
    current: float  # Degrees Celsius
    high: float | None = None
    critical: float | None = None


@dataclass(slots=True, frozen=True)
class HostSummary:
    """Host-wide information shown above the process table."""

    user: str
    system: str
    kernel: str
    os_version: str
    hostname: str
    memory_total: int  # Bytes
    memory_used: int
    swap_total: int
    swap_used: int
    cpu_count: int
    disks: tuple[DiskUsage, ...] = ()
    networks: tuple[NetworkInterface, ...] = ()
    temperatures: tuple[Temperature, ...] = ()
