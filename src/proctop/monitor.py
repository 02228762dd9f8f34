"""Process and host data collection for proctop."""

import logging
import os
import platform
import pwd
from functools import lru_cache
from typing import Protocol

import psutil

from proctop.errors import DataAcquisitionError
from proctop.models import (
    DiskUsage,
    HostSummary,
    NetworkInterface,
    ProcessRecord,
    Temperature,
    UNKNOWN_OWNER,
)

logger = logging.getLogger(__name__)


class SnapshotSource(Protocol):
    """Anything that can enumerate the processes of the host."""

    def get_snapshot(self) -> list[ProcessRecord]:
        """Return an unordered list of process records."""
        ...


@lru_cache(maxsize=1024)
def resolve_username(uid: int) -> str:
    """
    Resolve a numeric uid to a login name.

    Raises:
        DataAcquisitionError: The uid has no passwd entry.
    """
    try:
        return pwd.getpwuid(uid).pw_name
    except (KeyError, OverflowError) as exc:
        raise DataAcquisitionError(f"no user with uid {uid}") from exc


class PsutilSnapshotSource:
    """
    Snapshot source backed by psutil.

    Handles NoSuchProcess, AccessDenied and ZombieProcess errors gracefully:
    processes that vanish mid-iteration are skipped, fields that cannot be
    read come back as None.
    """

    # Attributes fetched for every process in one pass
    ATTRS = ["pid", "name", "exe", "uids", "cpu_percent"]

    def __init__(self) -> None:
        # Initialize per-process CPU percent (first call returns 0.0)
        try:
            for _ in psutil.process_iter(attrs=["cpu_percent"]):
                pass
        except psutil.Error as exc:
            logger.debug("Could not prime CPU sampling: %s", exc)

    def get_snapshot(self) -> list[ProcessRecord]:
        """Collect a record for every running process."""
        records: list[ProcessRecord] = []

        try:
            for proc in psutil.process_iter(attrs=self.ATTRS):
                try:
                    records.append(self._to_record(proc.info))
                except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                    continue
        except psutil.Error as exc:
            raise DataAcquisitionError(f"process enumeration failed: {exc}") from exc

        return records

    @staticmethod
    def _to_record(info: dict) -> ProcessRecord:
        """Translate a psutil info dict into a ProcessRecord."""
        uids = info.get("uids")
        return ProcessRecord(
            pid=info["pid"],
            name=info.get("name") or "",
            path=info.get("exe") or None,
            owner_uid=uids.real if uids else None,
            cpu_percent=info.get("cpu_percent") or 0.0,
        )


def _os_version() -> str:
    """Pretty OS name from os-release, falling back to the platform version."""
    try:
        return platform.freedesktop_os_release().get("PRETTY_NAME", "")
    except OSError:
        return platform.version()


def collect_disks() -> tuple[DiskUsage, ...]:
    """Usage of every mounted physical file system that can be read."""
    try:
        partitions = psutil.disk_partitions(all=False)
    except (psutil.Error, OSError) as exc:
        logger.debug("Disk partitions unavailable: %s", exc)
        return ()

    disks = []
    for part in partitions:
        try:
            usage = psutil.disk_usage(part.mountpoint)
        except OSError as exc:
            # Unreadable mount points (permissions, stale network mounts)
            logger.debug("Skipping disk %s: %s", part.mountpoint, exc)
            continue
        disks.append(
            DiskUsage(
                device=part.device,
                mountpoint=part.mountpoint,
                fstype=part.fstype,
                total=usage.total,
                used=usage.used,
            )
        )
    return tuple(disks)


def collect_networks() -> tuple[NetworkInterface, ...]:
    """Bytes received and transmitted per network interface, by name."""
    try:
        counters = psutil.net_io_counters(pernic=True)
    except (psutil.Error, OSError) as exc:
        logger.debug("Network counters unavailable: %s", exc)
        return ()

    return tuple(
        NetworkInterface(name=name, bytes_recv=io.bytes_recv, bytes_sent=io.bytes_sent)
        for name, io in sorted(counters.items())
    )


def collect_temperatures() -> tuple[Temperature, ...]:
    """Current readings of the hardware temperature sensors, if any."""
    try:
        sensors = psutil.sensors_temperatures()
    except AttributeError:
        # Not provided by psutil on this platform
        return ()
    except (psutil.Error, OSError) as exc:
        logger.debug("Temperature sensors unavailable: %s", exc)
        return ()

    temperatures = []
    for chip, entries in sensors.items():
        for entry in entries:
            temperatures.append(
                Temperature(
                    label=f"{chip} {entry.label}" if entry.label else chip,
                    current=float(entry.current),
                    high=entry.high,
                    critical=entry.critical,
                )
            )
    return tuple(temperatures)


def collect_host_summary() -> HostSummary:
    """
    Collect host-wide information for the header.

    Disks, network interfaces and temperature sensors that cannot be read
    are left out rather than failing the whole summary.

    Raises:
        DataAcquisitionError: psutil could not read memory statistics.
    """
    try:
        user = resolve_username(os.getuid())
    except DataAcquisitionError:
        user = UNKNOWN_OWNER

    try:
        mem = psutil.virtual_memory()
        swap = psutil.swap_memory()
    except (psutil.Error, OSError) as exc:
        raise DataAcquisitionError(f"memory statistics unavailable: {exc}") from exc

    return HostSummary(
        user=user,
        system=platform.system(),
        kernel=platform.release(),
        os_version=_os_version(),
        hostname=platform.node(),
        memory_total=mem.total,
        memory_used=mem.used,
        swap_total=swap.total,
        swap_used=swap.used,
        cpu_count=psutil.cpu_count() or 0,
        disks=collect_disks(),
        networks=collect_networks(),
        temperatures=collect_temperatures(),
    )
