"""`hmmpath decode` command implementation."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict

from rich.console import Console

from hmmpath.cli.runtime import add_runtime_arguments, start_run
from hmmpath.decode.decoder import ViterbiResult, viterbi
from hmmpath.errors import ConfigError, Pipeline
from hmmpath.errors.config import load_config, resolve_out_dir
from hmmpath.eval.metrics import accuracy, per_state_recall
from hmmpath.io import artifacts
from hmmpath.io.text_format import load_experiment_data, load_model
from hmmpath.model.hmm import Model
from hmmpath.model.observations import ExperimentData


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Register the `decode` command."""
    parser = subparsers.add_parser("decode", help="Decode the most probable state path for an observation file.")
    parser.add_argument("--model", required=True, help="Model description file.")
    parser.add_argument("--data", required=True, help="Observation sequence file.")
    parser.add_argument("--out-dir", default=None, help="Directory for the decode report and path artifacts.")
    add_runtime_arguments(parser)
    parser.set_defaults(handler=run)


def build_report(model: Model, data: ExperimentData, result: ViterbiResult) -> Dict[str, Any]:
    """Summarize a decode run; recall is keyed by state name."""
    truth = data.true_states()
    recall = per_state_recall(result.path, truth, model.n_states)
    return {
        "n_steps": len(data),
        "path": list(result.path),
        "states": [model.state_name(s) for s in result.path],
        "path_probability": result.path_probability,
        "accuracy": accuracy(result.path, truth),
        "per_state_recall": {model.state_name(s): r for s, r in recall.items()},
    }


def _write_artifacts(out_dir: Path, stem: str, report: Dict[str, Any]) -> Path:
    artifacts.save_path(report["path"], out_dir / "decode" / f"{stem}_path.npy")
    return artifacts.dump_decode_report(out_dir, stem, report)


def _print_report(console: Console, report: Dict[str, Any]) -> None:
    matched = round(report["accuracy"] * report["n_steps"])
    console.print(f"states:      {' '.join(report['states'])}", highlight=False, markup=False)
    console.print(f"probability: {report['path_probability']:.6e}", highlight=False, markup=False)
    console.print(
        f"accuracy:    {report['accuracy']:.4f} ({matched}/{report['n_steps']})", highlight=False, markup=False
    )


def run(args: argparse.Namespace) -> int:
    """Execute the `decode` command; return the exit status."""
    config = load_config(Path.cwd())
    try:
        out_dir = resolve_out_dir(config, Path(args.out_dir) if args.out_dir else None)
    except ConfigError as error:
        raise ConfigError(f"hmmpath decode: invalid output directory config. {error}") from error
    report = start_run(args, config)
    model_path = Path(args.model)
    data_path = Path(args.data)

    pipe = Pipeline(report)
    pipe.add("read_model", lambda r: load_model(model_path), context={"model": model_path})
    pipe.add(
        "read_data",
        lambda r: load_experiment_data(r["read_model"], data_path),
        requires=["read_model"],
        context={"data": data_path},
    )
    pipe.add("decode", lambda r: viterbi(r["read_model"], r["read_data"]), requires=["read_data"])
    pipe.add(
        "evaluate",
        lambda r: build_report(r["read_model"], r["read_data"], r["decode"]),
        requires=["decode"],
    )
    if out_dir is not None:
        pipe.add(
            "write_artifacts",
            lambda r: _write_artifacts(out_dir, data_path.stem, r["evaluate"]),
            requires=["evaluate"],
            context={"out_dir": out_dir},
        )
    results = pipe.run()

    console = Console()
    if "evaluate" in results:
        summary = results["evaluate"]
        report.logger.info(
            "Decoded %d steps (accuracy=%.4f)", summary["n_steps"], summary["accuracy"], extra={"step": "decode"}
        )
        _print_report(console, summary)
    if "write_artifacts" in results:
        report.logger.info("Wrote %s", results["write_artifacts"], extra={"step": "write_artifacts"})

    report.print_summary(console)
    return report.exit_code()
