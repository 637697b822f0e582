"""Synchronising local branches with the contents of a git bundle."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .process import ProcessError, run, run_output

_HEADS_PREFIX = "refs/heads/"
_MAIN_CANDIDATES = ("develop", "master")


def parse_bundle_branches(output: str) -> list[str]:
    """Extract branch names from ``git bundle list-heads`` output."""
    return [
        line.split(" ")[1].replace(_HEADS_PREFIX, "")
        for line in output.split("\n")
        if line and _HEADS_PREFIX in line
    ]


def parse_current_branches(output: str) -> list[str]:
    """Extract branch names from ``git branch`` output."""
    return [line.replace("*", "").replace(" ", "") for line in output.split("\n") if line]


def find_main_branch(branches: Iterable[str]) -> str:
    """Return the first of ``develop``/``master`` present, or ``main``."""
    return next((branch for branch in branches if branch in _MAIN_CANDIDATES), "main")


class SyncError(Exception):
    """Synchronising with a bundle failed."""


def _git(*args: str) -> None:
    run("git", args)


def _git_output(*args: str) -> str:
    return run_output("git", args)


class Sync:
    """Make the local branches match those stored in a bundle file."""

    def __init__(self, bundle) -> None:
        self.bundle = Path(bundle)
        self.bundle_branches: list[str] = []
        self.current_branches: list[str] = []

    def run(self) -> None:
        """Remove, add and update local branches to match the bundle."""
        try:
            self._sync()
        except ProcessError as err:
            raise SyncError(str(err)) from err

    def _sync(self) -> None:
        self.bundle_branches = parse_bundle_branches(
            _git_output("bundle", "list-heads", str(self.bundle))
        )
        self.current_branches = parse_current_branches(_git_output("branch"))

        original_branch = self._current_branch()

        self._checkout_main_branch()
        self._remove_old_branches()
        self._add_new_branches()
        self._update_branches()

        if original_branch in self.bundle_branches and original_branch != self._current_branch():
            _git("checkout", original_branch)

        _git("fetch", "--prune")

    @staticmethod
    def _current_branch() -> str:
        return _git_output("rev-parse", "--abbrev-ref", "HEAD").replace("\n", "")

    def _checkout_main_branch(self) -> None:
        current_branch = self._current_branch()
        main_branch = find_main_branch(self.current_branches)

        if _git_output("status", "--porcelain"):
            _git("stash", "--include-untracked")

        if current_branch != main_branch:
            _git("checkout", main_branch)

    def _remove_old_branches(self) -> None:
        for branch in [b for b in self.current_branches if b not in self.bundle_branches]:
            _git("branch", "-D", branch)
            print(f"Branch '{branch}' is removed.")

    def _add_new_branches(self) -> None:
        for branch in [b for b in self.bundle_branches if b not in self.current_branches]:
            _git("branch", branch)
            print(f"Branch '{branch}' is added.")

    def _update_branches(self) -> None:
        for branch in list(self.bundle_branches):
            if branch != self._current_branch():
                _git("checkout", branch)
            _git("pull", str(self.bundle), branch)
            print(f"Branch '{branch}' is updated.")