"""Pulling a repository from a remote server."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from .process import ProcessError, run, run_output
from .push import BUNDLE_NAME, ssh_target
from .sync import Sync, SyncError


class PullError(Exception):
    """Pulling from the remote server failed."""


class Pull:
    """Fetch all branches of a remote repository into the local one."""

    def __init__(self, ssh_url: str, directory) -> None:
        ssh_target(ssh_url)
        self.ssh_url = ssh_url
        self.directory = PurePosixPath(directory)

    def run(self) -> None:
        """Bundle remotely, copy the bundle here and sync local branches."""
        try:
            self._pull()
        except (ProcessError, SyncError, OSError) as err:
            raise PullError(str(err)) from err

    def _pull(self) -> None:
        target = ssh_target(self.ssh_url)
        git_root = run_output("git", ["rev-parse", "--show-toplevel"])
        bundle_dir = Path(git_root.strip()) / ".."

        print("Creating bundle file")
        run("ssh", [target, f"cd {self.directory} && git bundle create {BUNDLE_NAME} --all"])

        print("Pulling bundle file")
        run("scp", [f"{target}:{self.directory / BUNDLE_NAME}", str(bundle_dir)])
        run("ssh", [target, f"cd {self.directory} && rm {BUNDLE_NAME}"])

        print("Syncing the repository")
        file_path = bundle_dir / BUNDLE_NAME
        Sync(file_path).run()
        file_path.unlink()