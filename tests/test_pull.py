import os
import stat
import subprocess
from pathlib import PurePosixPath

import pytest

from coder.pull import Pull, PullError


def _git(cwd, *args):
    return subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    ).stdout.strip()


def _init_repo(path):
    path.mkdir(parents=True)
    _git(path, "init")
    _git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(path, "commit", "--allow-empty", "-m", "initial")
    return path


def _branches(repo):
    return set(_git(repo, "for-each-ref", "--format=%(refname:short)", "refs/heads").split())


def _script(directory, name, body):
    path = directory / name
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


@pytest.fixture
def env(monkeypatch, tmp_path):
    monkeypatch.delenv("CODER_DEBUG", raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for key in ("GIT_AUTHOR", "GIT_COMMITTER"):
        monkeypatch.setenv(f"{key}_NAME", "Test")
        monkeypatch.setenv(f"{key}_EMAIL", "test@example.com")
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ['PATH']}")
    return tmp_path, bin_dir


def test_pull_keeps_arguments():
    pull = Pull("ssh://user@host", "/srv/repo")
    assert pull.ssh_url == "ssh://user@host"
    assert pull.directory == PurePosixPath("/srv/repo")


def test_pull_rejects_invalid_url():
    with pytest.raises(ValueError):
        Pull("user@host", "/srv/repo")


def test_pull_end_to_end(env, monkeypatch, capsys):
    tmp_path, bin_dir = env
    _script(bin_dir, "ssh", 'shift\nexec sh -c "$1"')
    _script(bin_dir, "scp", 'exec cp "${1#*:}" "${2#*:}"')

    remote = _init_repo(tmp_path / "remote")
    (tmp_path / "work").mkdir()
    _git(tmp_path / "work", "clone", str(remote), "local")
    local = tmp_path / "work" / "local"
    _git(remote, "commit", "--allow-empty", "-m", "second")
    _git(remote, "checkout", "-b", "feature")
    _git(remote, "commit", "--allow-empty", "-m", "feature work")
    _git(remote, "checkout", "main")

    monkeypatch.chdir(local)
    Pull("ssh://user@host", str(remote)).run()

    assert _branches(local) == {"main", "feature"}
    assert _git(local, "rev-parse", "main") == _git(remote, "rev-parse", "main")
    assert _git(local, "rev-parse", "feature") == _git(remote, "rev-parse", "feature")
    assert not (tmp_path / "work" / "temp.bundle").exists()
    assert not (remote / "temp.bundle").exists()
    out = capsys.readouterr().out
    assert "Branch 'feature' is added." in out
    assert out.index("Pulling bundle file") < out.index("Syncing the repository")


def test_pull_failure_raises(env, monkeypatch):
    tmp_path, bin_dir = env
    _script(bin_dir, "ssh", "exit 1")
    local = _init_repo(tmp_path / "local")
    monkeypatch.chdir(local)
    monkeypatch.setenv("CODER_DEBUG", "1")
    with pytest.raises(PullError, match="Run command fails"):
        Pull("ssh://user@host", "/srv/repo").run()