"""Cgroup resource limits and device access for container specs."""

from __future__ import annotations

import json
import logging
import posixpath
import re
from dataclasses import dataclass
from typing import Iterable

logger = logging.getLogger(__name__)

_CPU_PERIOD = 100000
_DEVICE_MODE_RUNES = frozenset("rwm")
_SIZE_RE = re.compile(r"(\d+(?:\.\d+)*) ?([kKmMgGtTpP])?[iI]?[bB]?")
_BINARY_UNITS = {
    "k": 1024,
    "m": 1024**2,
    "g": 1024**3,
    "t": 1024**4,
    "p": 1024**5,
}


def _quote(s: str) -> str:
    return json.dumps(s, ensure_ascii=False)


@dataclass(frozen=True)
class CgroupConfig:
    """Cgroup settings to apply to a container's runtime spec."""

    cgroups_path: str | None = None
    cpu_quota: int | None = None
    cpu_period: int | None = None
    cpu_shares: int | None = None
    cpuset_cpus: str | None = None
    memory_limit: int | None = None
    pids_limit: int | None = None
    cgroupns: str | None = None
    devices: tuple[tuple[str, str], ...] = ()


def validate_device_mode(mode: str) -> None:
    """Raise ValueError unless every character of mode is one of r, w, m."""
    for ch in mode:
        if ch not in _DEVICE_MODE_RUNES:
            raise ValueError(
                f"invalid mode {_quote(mode)}: unexpected rune {ord(ch)}"
            )


def parse_device(s: str) -> tuple[str, str]:
    """Parse a --device value into (host device path, access mode)."""
    mode = "rwm"
    split = s.split(":")
    if len(split) == 1:
        host_path = split[0]
        container_path = host_path
    elif len(split) == 2:
        host_path = split[0]
        if "/" not in split[1]:
            container_path = host_path
            mode = split[1]
        else:
            container_path = split[1]
    elif len(split) == 3:
        host_path, container_path, mode = split
    else:
        raise ValueError("too many `:` symbols")

    if container_path != host_path:
        raise ValueError(
            "changing the path inside the container is not supported yet"
        )
    if not posixpath.isabs(host_path):
        raise ValueError(f"{_quote(host_path)} is not an absolute path")
    validate_device_mode(mode)
    return host_path, mode


def ram_in_bytes(size: str) -> int:
    """Parse a human-readable memory size ("42m", "1.5GiB") using binary units."""
    match = _SIZE_RE.fullmatch(size)
    if match is None:
        raise ValueError(f"invalid size: '{size}'")
    try:
        value = float(match.group(1))
    except ValueError:
        raise ValueError(f"invalid size: '{size}'") from None
    unit = match.group(2)
    if unit:
        value *= _BINARY_UNITS[unit.lower()]
    return int(value)


def generate_cgroup_config(
    cgroup_manager: str,
    container_id: str,
    cpus: float = 0.0,
    memory: str = "",
    pids_limit: int = -1,
    cpu_shares: int = 0,
    cpuset_cpus: str = "",
    cgroupns: str = "host",
    devices: Iterable[str] = (),
    rootless: bool = False,
    rootless_child: bool = False,
) -> CgroupConfig:
    """Build the cgroup configuration requested by the run flags."""
    if cgroup_manager == "none":
        if not rootless:
            raise ValueError('cgroup-manager "none" is only supported for rootless')
        if cpus > 0.0 or memory != "" or pids_limit > 0:
            logger.warning(
                'cgroup manager is set to "none", discarding resource limit '
                "requests. (Hint: enable cgroup v2 with systemd)"
            )
        return CgroupConfig(cgroups_path="")

    cgroups_path = None
    if cgroup_manager == "systemd":
        slice_name = "user.slice" if rootless_child else "system.slice"
        cgroups_path = f"{slice_name}:nerdctl:{container_id}"

    cpu_quota = cpu_period = None
    if cpus > 0.0:
        cpu_period = _CPU_PERIOD
        cpu_quota = int(cpus * 100000.0)

    shares = cpu_shares % (1 << 64) if cpu_shares != 0 else None

    memory_limit = None
    if memory:
        try:
            memory_limit = ram_in_bytes(memory)
        except ValueError as exc:
            raise ValueError(
                f"failed to parse memory bytes {_quote(memory)}: {exc}"
            ) from exc

    if cgroupns not in ("private", "host"):
        raise ValueError(f"unknown cgroupns mode {_quote(cgroupns)}")

    parsed_devices = []
    for dev in devices:
        try:
            parsed_devices.append(parse_device(dev))
        except ValueError as exc:
            raise ValueError(f"failed to parse device {_quote(dev)}: {exc}") from exc

    return CgroupConfig(
        cgroups_path=cgroups_path,
        cpu_quota=cpu_quota,
        cpu_period=cpu_period,
        cpu_shares=shares,
        cpuset_cpus=cpuset_cpus or None,
        memory_limit=memory_limit,
        pids_limit=pids_limit if pids_limit > 0 else None,
        cgroupns=cgroupns,
        devices=tuple(parsed_devices),
    )