import pytest

from ctrspec.runtime import (
    RUNTIME_RUNC_V2,
    RuntimeConfig,
    UserConfig,
    apply_sysctls,
    generate_runtime_config,
    generate_user_config,
)


def test_default_runtime_is_runc_v2():
    cfg = generate_runtime_config("", "cgroupfs")
    assert cfg.runtime == "io.containerd.runc.v2"
    assert cfg.uses_runc_options is True
    assert cfg.systemd_cgroup is False
    assert cfg.binary_name == ""


def test_explicit_runc_v2_same_as_default():
    assert generate_runtime_config(RUNTIME_RUNC_V2, "cgroupfs") == generate_runtime_config("", "cgroupfs")


def test_systemd_cgroup_manager_enables_systemd_cgroup():
    cfg = generate_runtime_config(RUNTIME_RUNC_V2, "systemd")
    assert cfg.systemd_cgroup is True
    assert cfg.runtime == RUNTIME_RUNC_V2


def test_binary_name_for_non_shim_runtime():
    cfg = generate_runtime_config("crun", "cgroupfs")
    assert cfg.runtime == RUNTIME_RUNC_V2
    assert cfg.binary_name == "crun"
    assert cfg.uses_runc_options is True


def test_non_runc_shim_drops_runc_options(caplog):
    with caplog.at_level("WARNING"):
        cfg = generate_runtime_config("io.containerd.runsc.v1", "systemd")
    assert cfg == RuntimeConfig(
        runtime="io.containerd.runsc.v1",
        uses_runc_options=False,
        systemd_cgroup=False,
        binary_name="",
    )
    assert "cannot set cgroup manager" in caplog.text


def test_other_runc_shim_keeps_options():
    cfg = generate_runtime_config("io.containerd.runc.v1", "systemd")
    assert cfg.runtime == "io.containerd.runc.v1"
    assert cfg.uses_runc_options is True
    assert cfg.systemd_cgroup is True


def test_apply_sysctls_merges_without_mutating():
    current = {"kernel.shmmax": "100"}
    result = apply_sysctls(current, {"net.ipv4.ip_forward": "1"})
    assert result == {"kernel.shmmax": "100", "net.ipv4.ip_forward": "1"}
    assert current == {"kernel.shmmax": "100"}


def test_apply_sysctls_overrides_and_accepts_none():
    assert apply_sysctls(None, {"net.ipv4.ip_forward": "1"}) == {"net.ipv4.ip_forward": "1"}
    assert apply_sysctls({"a": "1"}, {"a": "2"}) == {"a": "2"}


@pytest.mark.parametrize("user", ["1000", "guest", "nobody", "1000:1000"])
def test_user_config_set(user):
    cfg = generate_user_config(user)
    assert cfg.user == user
    assert cfg.reset_additional_gids is True
    assert cfg.additional_gids_from == user


def test_user_config_empty():
    assert generate_user_config("") == UserConfig()
    assert generate_user_config("").user is None