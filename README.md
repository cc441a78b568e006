# ctrspec

`ctrspec` turns the flags of a container `run`, `stop` and `top` command
into plain Python values. It checks them the way a container command line
does and raises an exception for values it rejects, mostly `ValueError`.

It has no runtime dependencies and runs on Python 3.10 and later.

## Install

```
pip install .
```

## Modules

- `ctrspec.devices`
  - `parse_device(s)` reads a `--device` value such as `/dev/sda1:rw` into
    `(host_path, mode)`; the mode defaults to `"rwm"`. Changing the path
    inside the container, relative paths and modes other than `r`, `w`, `m`
    raise `ValueError`.
  - `validate_device_mode(mode)` checks a mode string.
  - `ram_in_bytes(size)` reads sizes such as `"42m"` or `"1.5GiB"` with
    binary units.
  - `generate_cgroup_config(...)` returns a frozen `CgroupConfig` with the
    cgroup path (systemd slice), CPU quota and period, CPU shares, cpuset,
    memory and pids limits, cgroup namespace mode and devices. The `"none"`
    cgroup manager is allowed only when `rootless=True`.
- `ctrspec.gpus`
  - `parse_gpu_opt_csv(value)` reads a `--gpus` value (`all`, `count=2`,
    `"device=a,b"`, `"capabilities=compute,utility"`, `driver=nvidia`,
    `options=...`) into a `GpuRequest`.
  - `parse_count(s)` reads a count, with `"all"` meaning `-1`.
  - `parse_gpu_opt(value, rootless)` and `parse_gpu_opts(values, rootless)`
    build `GpuConfig` values; the `utility` capability is used when no known
    capability is requested.
- `ctrspec.security`
  - `generate_security_opts(security_opts, apparmor_supported,
    default_apparmor_profile)` returns a `SecurityConfig` for seccomp,
    AppArmor and no-new-privileges.
  - `generate_cap_opts(cap_add, cap_drop)` returns a `CapConfig`; names are
    upper-cased and given a `CAP_` prefix, and `all` adds or drops every
    capability.
- `ctrspec.runtime`
  - `generate_runtime_config(runtime, cgroup_manager)` returns a
    `RuntimeConfig`: a value starting with `io.containerd.` names a shim,
    anything else is taken as a runc-compatible binary.
  - `apply_sysctls(current, sysctls)` merges sysctl tables.
  - `generate_user_config(user)` returns a `UserConfig`.
- `ctrspec.top`
  - `parse_ps_output(output, procs)` keeps the ps rows of the given PIDs
    (and thread rows that follow them) in a `ContainerTop`, whose
    `append_process` merges overhanging fields into the last column.
  - `validate_ps_args`, `ps_pids_arg`, `fields_ascii`, `has_pid`.
  - `run_ps(ps_args, pids)` runs the host `ps` command (default `-ef`) and
    parses its output; it raises `RuntimeError` with the first line of
    `ps`'s error output when there is one, and returns `None` otherwise.
  - `format_top(top)` renders the table as aligned columns.
- `ctrspec.buildkit`
  - `buildctl_binary()` finds `buildctl` on `PATH`.
  - `buildctl_base_args(buildkit_host)` gives `["--addr=<host>"]`.
  - `ping_bk_daemon(buildkit_host, rootless)` runs
    `buildctl debug workers` and raises `RuntimeError` if it fails.
- `ctrspec.runfiles`
  - `parse_env_vars(paths)` reads env files, skipping `#` comment lines.
  - `write_cid_file(path, container_id)` writes a new container ID file and
    raises `FileExistsError` if one is already there.
  - `container_state_dir(data_store, namespace, container_id)` builds the
    per-container state directory path.
- `ctrspec.stopping`
  - `parse_stop_timeout(value)` reads the `--time` value in seconds.
  - `stop_steps(status, timeout)` returns a tuple of `StopStep` values:
    SIGTERM and a bounded wait, then SIGKILL and a wait, with resumes for
    paused tasks.
- `ctrspec.runopts`
  - `restart_options(restart_flag, log_uri)` returns a `RestartConfig` for
    `always`, or `None` for `no`.
  - `container_hostname`, `resolve_process_args`, `shm_size_kib`,
    `validate_interactive_flags`, `validate_pid_namespace`.
  - `internal_labels(...)` builds the `nerdctl/...` labels that record how
    a container was created.

## Example

```python
from ctrspec.devices import parse_device
from ctrspec.gpus import parse_gpu_opt_csv
from ctrspec.stopping import stop_steps

parse_device("/dev/sda2:r")        # ("/dev/sda2", "r")
parse_gpu_opt_csv("count=all").count   # -1
[s.action for s in stop_steps("running", 10)]
# ["kill", "wait", "kill", "wait"]
```

## What it does not do

`ctrspec` is a library only. It has no command-line program, does not talk
to a container daemon, and does not create, start, stop or remove
containers, pull or push images, or manage volumes and networks. It
produces the configuration values; applying them is left to the caller.
The only programs it starts are `ps` (in `run_ps`) and `buildctl` (in
`ping_bk_daemon`).

## Tests

```
pip install ".[test]"
pytest
```