"""Security options and Linux capability settings for container specs."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def _quote(s: str) -> str:
    return json.dumps(s, ensure_ascii=False)


def _parse_bool(s: str) -> bool:
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ValueError(f"invalid syntax {_quote(s)}")


@dataclass(frozen=True)
class SecurityConfig:
    """Seccomp, AppArmor and no-new-privileges settings."""

    seccomp_default: bool = False
    seccomp_profile: str | None = None
    apparmor_profile: str | None = None
    apparmor_default: bool = False
    no_new_privileges: bool = False


@dataclass(frozen=True)
class CapConfig:
    """Capability changes relative to the default set."""

    drop_all: bool = False
    add_all: bool = False
    added: tuple[str, ...] = ()
    dropped: tuple[str, ...] = ()


def generate_security_opts(
    security_opts: Mapping[str, str],
    apparmor_supported: bool,
    default_apparmor_profile: str,
) -> SecurityConfig:
    """Build security settings from parsed --security-opt key/value pairs."""
    seccomp_default = False
    seccomp_profile = None
    if "seccomp" in security_opts:
        profile = security_opts["seccomp"]
        if profile == "":
            raise ValueError('invalid security-opt "seccomp"')
        if profile != "unconfined":
            seccomp_profile = profile
    else:
        seccomp_default = True

    apparmor_profile = None
    apparmor_default = False
    if "apparmor" in security_opts:
        profile = security_opts["apparmor"]
        if profile == "":
            raise ValueError('invalid security-opt "apparmor"')
        if profile != "unconfined":
            if not apparmor_supported:
                logger.warning(
                    "The host does not support AppArmor. Ignoring profile %s",
                    _quote(profile),
                )
            else:
                apparmor_profile = profile
    elif apparmor_supported:
        apparmor_profile = default_apparmor_profile
        apparmor_default = True

    nnp = False
    if "no-new-privileges" in security_opts:
        raw = security_opts["no-new-privileges"]
        if raw == "":
            nnp = True
        else:
            try:
                nnp = _parse_bool(raw)
            except ValueError as exc:
                raise ValueError(
                    f'invalid "no-new-privileges" value: {_quote(raw)}: {exc}'
                ) from exc

    return SecurityConfig(
        seccomp_default=seccomp_default,
        seccomp_profile=seccomp_profile,
        apparmor_profile=apparmor_profile,
        apparmor_default=apparmor_default,
        no_new_privileges=nnp,
    )


def _contains_all(caps: list[str]) -> bool:
    return any(c.lower() == "all" for c in caps)


def generate_cap_opts(cap_add: Iterable[str], cap_drop: Iterable[str]) -> CapConfig:
    """Build capability changes from --cap-add and --cap-drop values."""
    cap_add = list(cap_add)
    cap_drop = list(cap_drop)
    if not cap_add and not cap_drop:
        return CapConfig()

    drop_all = _contains_all(cap_drop)
    add_all = _contains_all(cap_add)
    added = () if add_all else tuple("CAP_" + c.upper() for c in cap_add)
    dropped = () if drop_all else tuple("CAP_" + c.upper() for c in cap_drop)
    return CapConfig(drop_all=drop_all, add_all=add_all, added=added, dropped=dropped)