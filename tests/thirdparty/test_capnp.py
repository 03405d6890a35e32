import subprocess

import pytest

from capngen import utils
from capngen.errors import CapnpCompileError
from capngen.thirdparty import CapnpCompiler, check_all_requirements
from capngen.thirdparty import capnp as capnp_module


def test_command():
    compiler = CapnpCompiler("out/schema.capnp", import_paths=["/a", "/b"])
    assert compiler.command() == ["capnp", "compile", "-o-", "-I/a", "-I/b", "out/schema.capnp"]


def test_check_requirements(monkeypatch):
    monkeypatch.setattr(capnp_module.shutil, "which", lambda _: None)
    assert CapnpCompiler.check_requirements() == ["capnp"]
    assert check_all_requirements() == ["capnp"]
    monkeypatch.setattr(capnp_module.shutil, "which", lambda _: "/usr/bin/capnp")
    assert check_all_requirements() == []


def test_compile_success(monkeypatch):
    seen = {}

    def fake_run(cmd, **kwargs):
        seen["cmd"] = cmd
        seen["kwargs"] = kwargs
        return utils.ProcessResult(b"", b"", 0)

    monkeypatch.setattr(utils, "run_command", fake_run)
    CapnpCompiler("schema.capnp", timeout=5).compile()
    assert seen["cmd"][-1] == "schema.capnp"
    assert seen["kwargs"]["timeout"] == 5


def test_compile_rejected(monkeypatch):
    monkeypatch.setattr(
        utils, "run_command",
        lambda cmd, **kwargs: utils.ProcessResult(b"", b"schema.capnp:4:3: error: Parse error.\n", 1))
    with pytest.raises(CapnpCompileError) as excinfo:
        CapnpCompiler("schema.capnp").compile()
    assert "exit status 1" in str(excinfo.value)
    assert excinfo.value.diagnostics == "schema.capnp:4:3: error: Parse error."


def test_compile_missing_executable(monkeypatch):
    def missing(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(utils, "run_command", missing)
    with pytest.raises(CapnpCompileError) as excinfo:
        CapnpCompiler("schema.capnp", executable="capnp-nope").compile()
    assert "capnp-nope" in str(excinfo.value)


def test_compile_timeout(monkeypatch):
    def slow(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(utils, "run_command", slow)
    with pytest.raises(CapnpCompileError) as excinfo:
        CapnpCompiler("schema.capnp", timeout=1).compile()
    assert "within 1s" in str(excinfo.value)
