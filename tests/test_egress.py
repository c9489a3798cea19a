import subprocess

import pytest

import egress
from egress import EgressError, copy_to_clipboard, write_feed


def test_write_feed_has_no_trailing_newline(tmp_path):
    path = write_feed(tmp_path / "a" / "w.txt", "x:10.00")
    assert path.read_bytes() == b"x:10.00"


def test_copy_uses_first_available_tool(monkeypatch):
    monkeypatch.setattr(
        egress.shutil, "which", lambda name: "/usr/bin/xclip" if name == "xclip" else None
    )
    seen = {}

    def fake_run(cmd, input, check, timeout):
        seen["cmd"] = cmd
        seen["input"] = input
        return subprocess.CompletedProcess(cmd, 0)

    monkeypatch.setattr(egress.subprocess, "run", fake_run)

    copy_to_clipboard("a:10.00|b:5.00")

    assert seen == {
        "cmd": ["xclip", "-selection", "clipboard"],
        "input": b"a:10.00|b:5.00",
    }


def test_copy_without_tool_fails(monkeypatch):
    monkeypatch.setattr(egress.shutil, "which", lambda name: None)
    with pytest.raises(EgressError, match="--output-file"):
        copy_to_clipboard("x")


def test_copy_tool_failure_is_egress_error(monkeypatch):
    monkeypatch.setattr(egress.shutil, "which", lambda name: "/usr/bin/pbcopy")

    def fake_run(cmd, **kwargs):
        raise subprocess.CalledProcessError(1, cmd)

    monkeypatch.setattr(egress.subprocess, "run", fake_run)

    with pytest.raises(EgressError):
        copy_to_clipboard("x")
