"""``hmmpath`` command line: ``decode`` an observation file or ``validate`` a model."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from hmmpath.cli.commands import decode, validate
from hmmpath.version import __version__

# each module registers its parser and sets ``handler`` to its run function
COMMANDS = (decode, validate)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hmmpath",
        description="Most probable hidden-state paths for left-to-right HMMs.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="<command>")
    for command in COMMANDS:
        command.add_subparser(subparsers)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one command and return its exit status."""
    args = build_arg_parser().parse_args(argv)
    return args.handler(args)


def app() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    app()
