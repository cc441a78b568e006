"""OCI runtime selection, sysctls and user settings for container specs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

RUNTIME_RUNC_V2 = "io.containerd.runc.v2"
_CONTAINERD_RUNTIME_PREFIX = "io.containerd."
_RUNC_RUNTIME_PREFIX = "io.containerd.runc."


@dataclass(frozen=True)
class RuntimeConfig:
    """The containerd runtime to use and the runc options passed to it.

    ``uses_runc_options`` is False when the runtime is not a runc shim, in
    which case no runc options (systemd cgroup, binary name) are sent.
    """

    runtime: str = RUNTIME_RUNC_V2
    uses_runc_options: bool = True
    systemd_cgroup: bool = False
    binary_name: str = ""


@dataclass(frozen=True)
class UserConfig:
    """The process user and whether additional group IDs are recomputed."""

    user: str | None = None
    reset_additional_gids: bool = False

    @property
    def additional_gids_from(self) -> str | None:
        """The user spec from which additional group IDs are looked up."""
        return self.user


def generate_runtime_config(runtime: str = RUNTIME_RUNC_V2, cgroup_manager: str = "") -> RuntimeConfig:
    """Resolve the --runtime flag into a runtime name and its runc options.

    A value starting with ``io.containerd.`` names a shim; anything else is
    taken as the path or name of a runc-compatible binary.
    """
    name = RUNTIME_RUNC_V2
    systemd_cgroup = cgroup_manager == "systemd"
    binary_name = ""
    uses_runc_options = True

    if runtime:
        if runtime.startswith(_CONTAINERD_RUNTIME_PREFIX):
            name = runtime
            if not runtime.startswith(_RUNC_RUNTIME_PREFIX):
                if cgroup_manager == "systemd":
                    logger.warning(
                        'cannot set cgroup manager to "%s" for runtime "%s"',
                        cgroup_manager,
                        runtime,
                    )
                uses_runc_options = False
                systemd_cgroup = False
        else:
            binary_name = runtime

    return RuntimeConfig(
        runtime=name,
        uses_runc_options=uses_runc_options,
        systemd_cgroup=systemd_cgroup,
        binary_name=binary_name,
    )


def apply_sysctls(
    current: Mapping[str, str] | None, sysctls: Mapping[str, str]
) -> dict[str, str]:
    """Return the spec's sysctl table with the given sysctls set on top."""
    merged = dict(current or {})
    merged.update(sysctls)
    return merged


def generate_user_config(user: str = "") -> UserConfig:
    """Build the user settings for a --user value (empty means image default)."""
    if not user:
        return UserConfig()
    return UserConfig(user=user, reset_additional_gids=True)