# coder

A command-line tool for keeping git repositories in step between a local
machine and a remote server by means of git bundle files. It suits
air-gapped environments or restricted networks where the remote cannot be
reached as an ordinary git remote, but `ssh` and `scp` still work.

## Requirements

- Python 3.10 or later
- `git` on both machines
- `ssh` and `scp` on the local machine
- `coder` installed on the remote machine too, because `push` runs
  `coder sync` there

## Installation

```
pip install .
```

## Usage

Running `coder` with no command prints the help text; `coder --version`
prints the version.

### Sync from a bundle file

```
coder sync path/to/repo.bundle
```

Run this inside a git repository. It makes the local branches match the
bundle:

1. If the working tree has changes (`git status --porcelain` prints
   anything), they are stashed with `git stash --include-untracked`.
2. The main branch is checked out: the first of `develop` or `master`
   found among the local branches, otherwise `main`.
3. Local branches that are not in the bundle are deleted with
   `git branch -D`.
4. Branches that are only in the bundle are created.
5. Every branch in the bundle is checked out and pulled from the bundle.

At the end the branch you started on is checked out again if the bundle
still has it, and `git fetch --prune` is run. Each deleted, added and
updated branch is reported on standard output.

### Push to a remote server

```
coder push ssh://user@host /path/to/remote/repo
```

This writes a bundle of every local branch to `temp.bundle` in the current
directory, asks the remote for its repository's top level, copies the
bundle with `scp` to the directory above it, runs `coder sync` on the
remote and removes the remote bundle, then deletes the local
`temp.bundle`.

### Pull from a remote server

```
coder pull ssh://user@host /path/to/remote/repo
```

This builds `temp.bundle` in the remote directory over `ssh`, copies it
with `scp` to the directory above the local repository's top level,
removes the remote copy, syncs the local branches from it as `coder sync`
does, and deletes the local copy.

For both `push` and `pull` the URL must carry a scheme; the `ssh://`
prefix is stripped and the rest (`user@host`) is handed to `ssh` and
`scp`.

### Shell completion

```
coder --generate bash
```

Prints a completion script for the given shell (`bash`, `elvish`, `fish`,
`powershell` or `zsh`). The script completes the subcommand names and
option flags.

## Errors and debugging

By default the output of the git, ssh and scp commands that `coder` starts
is captured and hidden, and their exit status is not checked. Set
`CODER_DEBUG` to anything to let their output through to the terminal; a
command that then exits with a failure status stops `coder` with an error:

```
CODER_DEBUG=1 coder sync path/to/repo.bundle
```

If a required program cannot be found, or a step fails, `coder` prints
`Error: ...` to standard error and exits with status 1.

## Using it from Python

The same steps are available as classes: `coder.sync.Sync(bundle).run()`,
`coder.push.Push(ssh_url, directory).run()` and
`coder.pull.Pull(ssh_url, directory).run()`. They raise `SyncError`,
`PushError` and `PullError` respectively. `coder.process` provides
`run` and `run_output` for starting external commands, raising
`CommandNotFoundError` or `CommandFailedError`.

## What it does not do

- It does not restore changes it stashed before syncing; use
  `git stash pop` yourself afterwards.
- It does not check that the remote repository is up to date or that
  branches can be merged; a failing `git pull` is only reported when
  `CODER_DEBUG` is set.