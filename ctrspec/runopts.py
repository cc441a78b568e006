"""Option handling for running a container: restart policy, process args, labels."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from ctrspec.devices import ram_in_bytes

LABEL_PREFIX = "nerdctl/"
LABEL_NAMESPACE = LABEL_PREFIX + "namespace"
LABEL_NAME = LABEL_PREFIX + "name"
LABEL_HOSTNAME = LABEL_PREFIX + "hostname"
LABEL_STATE_DIR = LABEL_PREFIX + "state-dir"
LABEL_NETWORKS = LABEL_PREFIX + "networks"
LABEL_PORTS = LABEL_PREFIX + "ports"
LABEL_LOG_URI = LABEL_PREFIX + "log-uri"
LABEL_ANONYMOUS_VOLUMES = LABEL_PREFIX + "anonymous-volumes"

_HOSTNAME_LENGTH = 12

_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _to_json(value: Any) -> str:
    """Compact JSON with HTML-sensitive characters escaped."""
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    for raw, escaped in _JSON_ESCAPES.items():
        text = text.replace(raw, escaped)
    return text


@dataclass(frozen=True)
class RestartConfig:
    """A restart policy: keep the container in ``status``, logging to ``log_uri``."""

    status: str = "running"
    log_uri: str | None = None


def restart_options(restart_flag: str, log_uri: str = "") -> RestartConfig | None:
    """Resolve the --restart flag; None means the container is never restarted."""
    if restart_flag in ("", "no"):
        return None
    if restart_flag == "always":
        return RestartConfig(status="running", log_uri=log_uri or None)
    raise ValueError(
        f"unsupported restart type {json.dumps(restart_flag)}, "
        'supported types are: "no",  "always"'
    )


def container_hostname(container_id: str, custom_hostname: str = "") -> str:
    """Return the custom host name, or the first 12 characters of the ID."""
    if custom_hostname:
        return custom_hostname
    if len(container_id) < _HOSTNAME_LENGTH:
        raise ValueError(
            f"container ID {container_id!r} is shorter than {_HOSTNAME_LENGTH} characters"
        )
    return container_id[:_HOSTNAME_LENGTH]


def resolve_process_args(
    entrypoint: str,
    entrypoint_set: bool,
    args: Sequence[str],
    imageless: bool,
) -> list[str] | None:
    """Work out the process arguments of the container.

    ``args`` are the command-line arguments after the image (or rootfs).
    Returns None when the image's ENTRYPOINT applies, with ``args`` (if any)
    replacing its CMD. Otherwise returns the explicit argument list: the
    entrypoint, when not empty, followed by ``args``. An empty entrypoint
    disables the image's ENTRYPOINT and CMD.
    """
    if not imageless and not entrypoint_set:
        return None
    process_args: list[str] = []
    if entrypoint:
        process_args.append(entrypoint)
    process_args.extend(args)
    if not process_args:
        raise ValueError(
            "no command or entrypoint provided, and no CMD or ENTRYPOINT from image"
        )
    return process_args


def shm_size_kib(shm_size: str) -> int:
    """Return the size of /dev/shm in KiB for a --shm-size value such as "64m"."""
    return ram_in_bytes(shm_size) // 1024


def validate_interactive_flags(interactive: bool, tty: bool, detach: bool) -> bool:
    """Check the -i, -t and -d combination; return True when a TTY is allocated."""
    if interactive and detach:
        raise ValueError("currently flag -i and -d cannot be specified together")
    if tty:
        if detach:
            raise ValueError("currently flag -t and -d cannot be specified together")
        if not interactive:
            raise ValueError("currently flag -t needs -i to be specified together")
        return True
    return False


def validate_pid_namespace(pid: str) -> bool:
    """Check --pid; return True when the host PID namespace is to be shared."""
    mode = pid.lower()
    if not mode:
        return False
    if mode != "host":
        raise ValueError(
            "Invalid pid namespace. Set --pid=host to enable host pid namespace."
        )
    return True


def internal_labels(
    namespace: str,
    name: str,
    hostname: str,
    state_dir: str,
    networks: Iterable[str],
    ports: Iterable[Mapping[str, Any]] = (),
    log_uri: str = "",
    anon_volumes: Iterable[str] = (),
) -> dict[str, str]:
    """Return the labels that record how the container was created."""
    labels = {LABEL_NAMESPACE: namespace}
    if name:
        labels[LABEL_NAME] = name
    labels[LABEL_HOSTNAME] = hostname
    labels[LABEL_STATE_DIR] = state_dir
    labels[LABEL_NETWORKS] = _to_json(list(networks))
    port_list = [dict(p) for p in ports]
    if port_list:
        labels[LABEL_PORTS] = _to_json(port_list)
    if log_uri:
        labels[LABEL_LOG_URI] = log_uri
    volumes = list(anon_volumes)
    if volumes:
        labels[LABEL_ANONYMOUS_VOLUMES] = _to_json(volumes)
    return labels