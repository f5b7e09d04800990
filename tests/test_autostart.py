import os

from deskkit.autostart import BLOCKING_SCRIPT, SCRIPT, autostart_dir, run_autostart


def _env(home, **extra):
    env = {"HOME": str(home), "PATH": os.environ.get("PATH", "/usr/bin:/bin")}
    env.update(extra)
    return env


def _script(path, body):
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(0o755)
    return path


def test_no_home_means_no_directory():
    assert autostart_dir({}) is None
    assert run_autostart({}) == []


def test_xdg_data_home_used_when_present(tmp_path):
    xdg = tmp_path / "data"
    (xdg / "dwm").mkdir(parents=True)
    assert autostart_dir(_env(tmp_path, XDG_DATA_HOME=str(xdg))) == xdg / "dwm"


def test_local_share_used_without_xdg(tmp_path):
    target = tmp_path / ".local" / "share" / "dwm"
    target.mkdir(parents=True)
    assert autostart_dir(_env(tmp_path, XDG_DATA_HOME="")) == target


def test_falls_back_to_dot_dwm(tmp_path):
    missing = tmp_path / "nothing"
    assert autostart_dir(_env(tmp_path, XDG_DATA_HOME=str(missing))) == tmp_path / ".dwm"


def test_runs_blocking_then_background_script(tmp_path):
    directory = tmp_path / ".dwm"
    directory.mkdir()
    marker = tmp_path / "blocking-ran"
    blocking = _script(directory / BLOCKING_SCRIPT, f"touch '{marker}'")
    background = _script(directory / SCRIPT, "true")

    started = run_autostart(_env(tmp_path))

    assert started == [blocking, background]
    assert marker.exists()


def test_non_executable_scripts_are_skipped(tmp_path):
    directory = tmp_path / ".dwm"
    directory.mkdir()
    (directory / BLOCKING_SCRIPT).write_text("#!/bin/sh\ntrue\n")
    (directory / SCRIPT).write_text("#!/bin/sh\ntrue\n")
    assert run_autostart(_env(tmp_path)) == []