"""Pushing the local repository to a remote server."""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath

from .process import ProcessError, run, run_output

BUNDLE_NAME = "temp.bundle"
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


class PushError(Exception):
    """Pushing to the remote server failed."""


def ssh_target(ssh_url: str) -> str:
    """Turn ``ssh://user@host`` into the ``user@host`` form ssh and scp take."""
    if not _SCHEME.match(ssh_url):
        raise ValueError(f"invalid URL: {ssh_url!r}")
    return ssh_url.replace("ssh://", "")


class Push:
    """Send all local branches to a repository on a remote server."""

    def __init__(self, ssh_url: str, directory) -> None:
        ssh_target(ssh_url)
        self.ssh_url = ssh_url
        self.directory = PurePosixPath(directory)

    def run(self) -> None:
        """Bundle, copy and sync the repository on the remote side."""
        try:
            self._push()
        except (ProcessError, OSError) as err:
            raise PushError(str(err)) from err

    def _push(self) -> None:
        target = ssh_target(self.ssh_url)

        print("Creating bundle file")
        run("git", ["bundle", "create", BUNDLE_NAME, "--all"])

        git_root = run_output(
            "ssh", [target, f"cd {self.directory} && git rev-parse --show-toplevel"]
        )
        bundle_dir = PurePosixPath(git_root.strip()) / ".."
        file_path = bundle_dir / BUNDLE_NAME

        print("Pushing bundle file")
        run("scp", [BUNDLE_NAME, f"{target}:{bundle_dir}"])

        print("Syncing the repository")
        run(
            "ssh",
            [target, f"cd {self.directory} && coder sync {file_path} && rm {file_path}"],
        )
        Path(BUNDLE_NAME).unlink()