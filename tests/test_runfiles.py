import os

import pytest

from ctrspec.runfiles import container_state_dir, parse_env_vars, write_cid_file


def test_parse_env_vars_two_files(tmp_path):
    path1 = tmp_path / "env1"
    path1.write_text("# this is a comment line\nTESTKEY1=TESTVAL1")
    path2 = tmp_path / "env2"
    path2.write_text("# this is a comment line\nTESTKEY2=TESTVAL2")
    assert parse_env_vars([path1, path2]) == ["TESTKEY1=TESTVAL1", "TESTKEY2=TESTVAL2"]


def test_parse_env_vars_strips_whitespace(tmp_path):
    path = tmp_path / "env"
    path.write_text("  FOO=bar  \r\n\t# indented comment\nBAZ=qux\n")
    assert parse_env_vars([path]) == ["FOO=bar", "BAZ=qux"]


def test_parse_env_vars_no_files():
    assert parse_env_vars([]) == []


def test_parse_env_vars_missing_file(tmp_path):
    missing = tmp_path / "nope"
    with pytest.raises(OSError, match="failed to open env file"):
        parse_env_vars([missing])


def test_write_cid_file_creates_then_refuses(tmp_path):
    path = tmp_path / "cid.file"
    write_cid_file(path, "abc123")
    assert path.read_text() == "abc123"
    with pytest.raises(FileExistsError, match="container ID file found"):
        write_cid_file(path, "def456")
    assert path.read_text() == "abc123"


def test_write_cid_file_missing_directory(tmp_path):
    path = tmp_path / "no-such-dir" / "cid.file"
    with pytest.raises(OSError, match="failed to create the container ID file"):
        write_cid_file(path, "abc")


def test_container_state_dir():
    assert container_state_dir("/var/lib/data", "default", "abc") == os.path.join(
        "/var/lib/data", "containers", "default", "abc"
    )


def test_container_state_dir_requires_namespace():
    with pytest.raises(ValueError, match="namespace is required"):
        container_state_dir("/data", "", "abc")


def test_container_state_dir_rejects_slash():
    with pytest.raises(ValueError, match="unsupported"):
        container_state_dir("/data", "a/b", "abc")