"""Parsing of --gpus requests into NVIDIA GPU settings."""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass, field
from typing import Iterable

NVIDIA_CAPABILITIES = ("compute", "compat32", "graphics", "utility", "video", "display")

_INT_RE = re.compile(r"[+-]?\d+")


@dataclass
class GpuRequest:
    """A parsed --gpus request."""

    count: int = 0
    device_ids: list[str] = field(default_factory=list)
    capabilities: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class GpuConfig:
    """GPU settings for a container: which devices and which capabilities."""

    all_devices: bool = False
    device_indices: tuple[int, ...] = ()
    device_uuids: tuple[str, ...] = ()
    capabilities: tuple[str, ...] = ()
    no_cgroups: bool = False


def parse_count(s: str) -> int:
    """Parse a GPU count; "all" means -1."""
    if s == "all":
        return -1
    if not _INT_RE.fullmatch(s):
        raise ValueError(f"count must be an integer: invalid syntax {s!r}")
    return int(s)


def _read_first_record(value: str) -> list[str]:
    try:
        for row in csv.reader(io.StringIO(value), strict=True):
            if row:
                return row
    except csv.Error as exc:
        raise ValueError(str(exc)) from exc
    raise ValueError("empty gpu request")


def parse_gpu_opt_csv(value: str) -> GpuRequest:
    """Parse the CSV form of a --gpus value."""
    req = GpuRequest()
    seen: set[str] = set()
    for item in _read_first_record(value):
        key, sep, val = item.partition("=")
        if key in seen:
            raise ValueError(f"gpu request key '{key}' can be specified only once")
        seen.add(key)

        if not sep:
            seen.add("count")
            req.count = parse_count(key)
            continue

        if key == "driver":
            if val != "nvidia":
                raise ValueError(f'invalid driver "{val}": "nvidia" is only supported')
        elif key == "count":
            req.count = parse_count(val)
        elif key == "device":
            req.device_ids = val.split(",")
        elif key == "capabilities":
            req.capabilities = val.split(",")
        elif key == "options":
            pass
        else:
            raise ValueError(f"unexpected key '{key}' in '{item}'")

    if req.count != 0 and req.device_ids:
        raise ValueError("cannot set both Count and DeviceIDs on device request")
    if "count" not in seen and not req.device_ids:
        req.count = 1
    return req


def parse_gpu_opt(value: str, rootless: bool = False) -> GpuConfig:
    """Turn one --gpus value into GPU settings."""
    req = parse_gpu_opt_csv(value)

    all_devices = False
    indices: tuple[int, ...] = ()
    uuids: tuple[str, ...] = ()
    if req.device_ids:
        uuids = tuple(req.device_ids)
    elif req.count > 0:
        indices = tuple(range(req.count))
    elif req.count < 0:
        all_devices = True

    caps = tuple(c for c in req.capabilities if c in NVIDIA_CAPABILITIES)
    if not caps:
        caps = ("utility",)

    return GpuConfig(
        all_devices=all_devices,
        device_indices=indices,
        device_uuids=uuids,
        capabilities=caps,
        no_cgroups=rootless,
    )


def parse_gpu_opts(values: Iterable[str], rootless: bool = False) -> list[GpuConfig]:
    """Turn every --gpus value into GPU settings."""
    return [parse_gpu_opt(v, rootless) for v in values]