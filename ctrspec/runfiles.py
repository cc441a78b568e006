"""Files a container run reads and writes: env files, CID files, state dirs."""

from __future__ import annotations

import os
from typing import Iterable


def parse_env_vars(paths: Iterable[str | os.PathLike]) -> list[str]:
    """Read environment entries from env files, in order.

    Each line is stripped of surrounding whitespace; lines starting with
    "#" are comments and are skipped.
    """
    variables: list[str] = []
    for path in paths:
        try:
            handle = open(path, encoding="utf-8")
        except OSError as exc:
            raise OSError(exc.errno, f"failed to open env file {os.fspath(path)}: {exc}") from exc
        with handle:
            for line in handle:
                line = line.strip()
                if line.startswith("#"):
                    continue
                variables.append(line)
    return variables


def write_cid_file(path: str | os.PathLike, container_id: str) -> None:
    """Write the container ID to a new file; refuse if the file exists."""
    if os.path.lexists(path):
        raise FileExistsError(
            "container ID file found, make sure the other container isn't "
            f"running or delete {os.fspath(path)}"
        )
    try:
        handle = open(path, "x", encoding="utf-8")
    except OSError as exc:
        raise OSError(exc.errno, f"failed to create the container ID file: {exc}") from exc
    with handle:
        handle.write(container_id)


def container_state_dir(data_store: str, namespace: str, container_id: str) -> str:
    """Return the per-container state directory under the data store."""
    if not namespace:
        raise ValueError("namespace is required")
    if "/" in namespace:
        raise ValueError("namespace with '/' is unsupported")
    return os.path.join(data_store, "containers", namespace, container_id)