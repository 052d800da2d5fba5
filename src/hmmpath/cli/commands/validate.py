"""`hmmpath validate` command implementation."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console

from hmmpath.cli.runtime import add_runtime_arguments, start_run
from hmmpath.errors.config import load_config
from hmmpath.io.text_format import index_to_symbol, load_model


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Register the `validate` command."""
    parser = subparsers.add_parser("validate", help="Read and validate a model description.")
    parser.add_argument("--model", required=True, help="Model description file.")
    add_runtime_arguments(parser)
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace) -> int:
    """Execute the `validate` command; return the exit status."""
    report = start_run(args, load_config(Path.cwd()))
    model_path = Path(args.model)
    model = report.call("read_model", lambda: load_model(model_path), context={"model": model_path})

    console = Console()
    if model is not None:
        console.print(
            f"{model_path.name}: {model.n_states} states, alphabet of {model.alphabet_size}",
            highlight=False,
            markup=False,
        )
        for src, dst, prob in model.transitions():
            console.print(f"  {src} -> {dst}: {prob:g}", highlight=False, markup=False)
        for state, symbol, prob in model.emissions():
            console.print(f"  {state} emits {index_to_symbol(symbol)}: {prob:g}", highlight=False, markup=False)

    report.print_summary(console)
    return report.exit_code()
