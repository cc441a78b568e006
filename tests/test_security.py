import logging

import pytest

from ctrspec.security import CapConfig, generate_cap_opts, generate_security_opts

PROFILE = "nerdctl-default"


def test_defaults_with_apparmor():
    cfg = generate_security_opts({}, True, PROFILE)
    assert cfg.seccomp_default is True
    assert cfg.seccomp_profile is None
    assert cfg.apparmor_profile == PROFILE
    assert cfg.apparmor_default is True
    assert cfg.no_new_privileges is False


def test_defaults_without_apparmor():
    cfg = generate_security_opts({}, False, PROFILE)
    assert cfg.apparmor_profile is None
    assert cfg.apparmor_default is False


def test_seccomp_unconfined():
    cfg = generate_security_opts({"seccomp": "unconfined"}, True, PROFILE)
    assert cfg.seccomp_default is False
    assert cfg.seccomp_profile is None


def test_seccomp_custom_profile():
    cfg = generate_security_opts({"seccomp": "/etc/profile.json"}, True, PROFILE)
    assert cfg.seccomp_profile == "/etc/profile.json"
    assert cfg.seccomp_default is False


@pytest.mark.parametrize("key", ["seccomp", "apparmor"])
def test_empty_values_rejected(key):
    with pytest.raises(ValueError, match=f'invalid security-opt "{key}"'):
        generate_security_opts({key: ""}, True, PROFILE)


def test_apparmor_unconfined():
    cfg = generate_security_opts({"apparmor": "unconfined"}, True, PROFILE)
    assert cfg.apparmor_profile is None


def test_apparmor_custom_profile():
    cfg = generate_security_opts({"apparmor": "custom"}, True, PROFILE)
    assert cfg.apparmor_profile == "custom"
    assert cfg.apparmor_default is False


def test_apparmor_unsupported_host_ignores_profile(caplog):
    with caplog.at_level(logging.WARNING):
        cfg = generate_security_opts({"apparmor": "custom"}, False, PROFILE)
    assert cfg.apparmor_profile is None
    assert "does not support AppArmor" in caplog.text


@pytest.mark.parametrize(
    "value, expected",
    [("", True), ("true", True), ("1", True), ("TRUE", True), ("false", False), ("0", False)],
)
def test_no_new_privileges(value, expected):
    cfg = generate_security_opts({"no-new-privileges": value}, False, PROFILE)
    assert cfg.no_new_privileges is expected


def test_no_new_privileges_invalid():
    with pytest.raises(ValueError, match='invalid "no-new-privileges" value'):
        generate_security_opts({"no-new-privileges": "maybe"}, False, PROFILE)


def test_caps_empty():
    assert generate_cap_opts([], []) == CapConfig()


def test_caps_add_all():
    cfg = generate_cap_opts(["all"], [])
    assert cfg.add_all is True
    assert cfg.added == ()
    assert cfg.drop_all is False


def test_caps_add_one():
    cfg = generate_cap_opts(["ipc_lock"], [])
    assert cfg.added == ("CAP_IPC_LOCK",)
    assert cfg.dropped == ()


def test_caps_add_all_drop_one():
    cfg = generate_cap_opts(["all"], ["net_raw"])
    assert cfg.add_all is True
    assert cfg.dropped == ("CAP_NET_RAW",)


def test_caps_drop_all_add_one():
    cfg = generate_cap_opts(["net_raw"], ["ALL"])
    assert cfg.drop_all is True
    assert cfg.dropped == ()
    assert len(cfg.added) == 1
    assert cfg.added[0].startswith("CAP_")