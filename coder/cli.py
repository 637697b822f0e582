"""Command-line interface: sync, push, pull and shell completion."""

from __future__ import annotations

import argparse
import sys
from enum import Enum
from pathlib import Path, PurePosixPath

from .pull import Pull, PullError
from .push import Push, PushError, ssh_target
from .sync import Sync, SyncError

VERSION = "0.1.0"

_DESCRIPTION = (
    "A CLI tool for syncing git repositories between local and remote servers using git bundles.\n"
    "Useful for air-gapped environments or restricted networks without direct git remote access."
)
_URL_HELP = "The ssh URL of the remote server (ex: ssh://user@host)"
_DIRECTORY_HELP = "The target repository directory in the remote server"


class Shell(str, Enum):
    """Shells a completion script can be generated for."""

    BASH = "bash"
    ELVISH = "elvish"
    FISH = "fish"
    POWERSHELL = "powershell"
    ZSH = "zsh"


def _url(value: str) -> str:
    try:
        ssh_target(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from err
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``coder`` command."""
    parser = argparse.ArgumentParser(
        prog="coder",
        description=_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "--generate",
        choices=[shell.value for shell in Shell],
        help="Generate shell completion script",
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    sync = commands.add_parser(
        "sync",
        help="Sync local repository with a git bundle file",
        description="Update local branches to match the bundle. Removes branches not in bundle, "
        "adds new branches, and updates existing ones.",
    )
    sync.add_argument("bundle", type=Path, help="Path to the bundle file")

    remote_commands = (
        (
            "push",
            "Push local repository to a remote server",
            "Create a git bundle from all local branches, transfer it to the remote server via "
            "SCP, and run sync on the remote.",
        ),
        (
            "pull",
            "Pull repository from a remote server",
            "Create a git bundle on the remote server, transfer it locally via SCP, and sync "
            "local branches.",
        ),
    )
    for name, summary, description in remote_commands:
        sub = commands.add_parser(name, help=summary, description=description)
        sub.add_argument("ssh_url", type=_url, help=_URL_HELP)
        sub.add_argument("directory", type=PurePosixPath, help=_DIRECTORY_HELP)

    return parser


def _flags(parser: argparse.ArgumentParser) -> list[str]:
    return [flag for action in parser._actions for flag in action.option_strings]


def _subcommands(parser: argparse.ArgumentParser) -> dict[str, list[str]]:
    for action in parser._actions:
        if isinstance(action, argparse._SubParsersAction):
            return {name: _flags(sub) for name, sub in action.choices.items()}
    return {}


def _ident(name: str) -> str:
    return "".join(ch if ch.isalnum() else "_" for ch in name)


def _quoted(items) -> str:
    return " ".join(f"'{item}'" for item in items)


def _bash(name: str, top: list[str], subs: dict[str, list[str]]) -> str:
    func = f"_{_ident(name)}"
    first_words = " ".join([*top, *subs])
    lines = [
        f"{func}() {{",
        "    local cur",
        '    cur="${COMP_WORDS[COMP_CWORD]}"',
        '    if [ "$COMP_CWORD" -eq 1 ]; then',
        f'        COMPREPLY=($(compgen -W "{first_words}" -- "$cur"))',
        "        return 0",
        "    fi",
        '    case "${COMP_WORDS[1]}" in',
    ]
    for sub, flags in subs.items():
        words = " ".join(flags)
        lines.append(f'        {sub}) COMPREPLY=($(compgen -W "{words}" -f -- "$cur")) ;;')
    lines += [
        "        *) COMPREPLY=() ;;",
        "    esac",
        "}",
        f"complete -F {func} -o bashdefault -o default {name}",
    ]
    return "\n".join(lines) + "\n"


def _zsh(name: str, top: list[str], subs: dict[str, list[str]]) -> str:
    func = f"_{_ident(name)}"
    lines = [
        f"#compdef {name}",
        "",
        f"{func}() {{",
        "    if (( CURRENT == 2 )); then",
        f"        compadd -- {_quoted([*top, *subs])}",
        "        return",
        "    fi",
        "    case $words[2] in",
    ]
    for sub, flags in subs.items():
        lines.append(f"        {sub}) compadd -- {_quoted(flags)}; _files ;;")
    lines += [
        "    esac",
        "}",
        "",
        f'if [ "$funcstack[1]" = "{func}" ]; then',
        f'    {func} "$@"',
        "else",
        f"    compdef {func} {name}",
        "fi",
    ]
    return "\n".join(lines) + "\n"


def _fish_flag(flag: str) -> str:
    return f"-l {flag[2:]}" if flag.startswith("--") else f"-s {flag[1:]}"


def _fish(name: str, top: list[str], subs: dict[str, list[str]]) -> str:
    lines = [f'complete -c {name} -n "__fish_use_subcommand" {_fish_flag(flag)}' for flag in top]
    lines += [f'complete -c {name} -n "__fish_use_subcommand" -f -a "{sub}"' for sub in subs]
    for sub, flags in subs.items():
        lines += [
            f'complete -c {name} -n "__fish_seen_subcommand_from {sub}" {_fish_flag(flag)}'
            for flag in flags
        ]
    return "\n".join(lines) + "\n"


def _powershell(name: str, top: list[str], subs: dict[str, list[str]]) -> str:
    lines = [
        f"Register-ArgumentCompleter -Native -CommandName '{name}' -ScriptBlock {{",
        "    param($wordToComplete, $commandAst, $cursorPosition)",
        "    $elements = @($commandAst.CommandElements | ForEach-Object { $_.ToString() })",
        "    $command = ''",
        "    if ($elements.Count -gt 2 -or ($elements.Count -eq 2 -and $wordToComplete -eq '')) {",
        "        $command = $elements[1]",
        "    }",
        "    $candidates = switch ($command) {",
    ]
    for sub, flags in subs.items():
        lines.append(f"        '{sub}' {{ @({', '.join(repr(f) for f in flags)}) }}")
    lines += [
        f"        default {{ @({', '.join(repr(w) for w in [*top, *subs])}) }}",
        "    }",
        '    $candidates | Where-Object { $_ -like "$wordToComplete*" } | ForEach-Object {',
        "        [System.Management.Automation.CompletionResult]::new($_, $_, 'ParameterValue', $_)",
        "    }",
        "}",
    ]
    return "\n".join(lines) + "\n"


def _elvish(name: str, top: list[str], subs: dict[str, list[str]]) -> str:
    lines = [
        f"set edit:completion:arg-completer[{name}] = {{|@words|",
        "    if (== (count $words) 2) {",
        f"        put {_quoted([*top, *subs])}",
    ]
    for sub, flags in subs.items():
        lines += [f"    }} elif (eq $words[1] {sub}) {{", f"        put {_quoted(flags)}"]
    lines += ["    }", "}"]
    return "\n".join(lines) + "\n"


_GENERATORS = {
    Shell.BASH: _bash,
    Shell.ELVISH: _elvish,
    Shell.FISH: _fish,
    Shell.POWERSHELL: _powershell,
    Shell.ZSH: _zsh,
}


def generate_completion(shell, parser: argparse.ArgumentParser) -> str:
    """Return a completion script for ``parser`` in the given shell's syntax."""
    generator = _GENERATORS[Shell(shell)]
    return generator(parser.prog, _flags(parser), _subcommands(parser))


def main(argv=None) -> int:
    """Run the ``coder`` command and return its exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.generate:
        sys.stdout.write(generate_completion(Shell(args.generate), parser))
        return 0

    try:
        if args.command == "sync":
            Sync(args.bundle).run()
        elif args.command == "push":
            Push(args.ssh_url, args.directory).run()
        elif args.command == "pull":
            Pull(args.ssh_url, args.directory).run()
        else:
            parser.print_help()
    except (SyncError, PushError, PullError, OSError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    return 0