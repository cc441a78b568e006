"""Locating buildctl and checking that a BuildKit daemon answers."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess

logger = logging.getLogger(__name__)

_HINT = (
    "`buildctl` needs to be installed and `buildkitd` needs to be running"
)
_ROOTLESS_HINT = " , and `containerd-rootless-setuptool.sh install-buildkit`"


def buildctl_binary() -> str:
    """Return the path of buildctl found on PATH."""
    path = shutil.which("buildctl")
    if path is None:
        raise FileNotFoundError(
            'exec: "buildctl": executable file not found in $PATH'
        )
    return path


def buildctl_base_args(buildkit_host: str) -> list[str]:
    """Return the arguments that point buildctl at buildkit_host."""
    return ["--addr=" + buildkit_host]


def ping_bk_daemon(buildkit_host: str, rootless: bool = False) -> None:
    """Raise RuntimeError unless buildctl can reach the BuildKit daemon."""
    hint = _HINT + (_ROOTLESS_HINT if rootless else "")
    try:
        binary = buildctl_binary()
    except FileNotFoundError as exc:
        raise RuntimeError(f"{hint}: {exc}") from exc

    args = [binary, *buildctl_base_args(buildkit_host), "debug", "workers"]
    try:
        result = subprocess.run(
            args,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            env=dict(os.environ),
        )
    except OSError as exc:
        raise RuntimeError(f"{hint}: {exc}") from exc
    if result.returncode != 0:
        logger.error("%s", result.stdout.decode(errors="replace"))
        raise RuntimeError(f"{hint}: exit status {result.returncode}")