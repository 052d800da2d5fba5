"""Shared run setup for CLI commands: settings layering, logging and the step report."""

from __future__ import annotations

import argparse
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from hmmpath.errors import RunReport, RunSettings, configure_logging
from hmmpath.errors.config import config_section, parse_flag, parse_mode

ENV_PREFIX = "HMMPATH_"


def add_runtime_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the options every reporting command shares."""
    parser.add_argument("--mode", choices=("debug", "run"), default=None, help="Error handling mode.")
    parser.add_argument("--log-dir", default=None, help="Directory for run logs.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug messages on the console.")


def _from_config(config: Mapping[str, Any]) -> Dict[str, Any]:
    section = config_section(config, "run")
    overrides: Dict[str, Any] = {}
    if "mode" in section:
        overrides["mode"] = parse_mode(section["mode"], source="run.mode")
    if section.get("log_dir"):
        overrides["log_dir"] = Path(str(section["log_dir"]))
    if "write_jsonl" in section:
        overrides["write_jsonl"] = parse_flag(section["write_jsonl"], source="run.write_jsonl")
    return overrides


def _from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    mode = environ.get(f"{ENV_PREFIX}ERROR_MODE")
    if mode is not None:
        overrides["mode"] = parse_mode(mode, source=f"{ENV_PREFIX}ERROR_MODE")
    log_dir = environ.get(f"{ENV_PREFIX}LOG_DIR")
    if log_dir:
        overrides["log_dir"] = Path(log_dir)
    write_jsonl = environ.get(f"{ENV_PREFIX}WRITE_JSONL")
    if write_jsonl is not None:
        overrides["write_jsonl"] = parse_flag(write_jsonl, source=f"{ENV_PREFIX}WRITE_JSONL")
    return overrides


def _from_args(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if getattr(args, "mode", None):
        overrides["mode"] = args.mode
    if getattr(args, "log_dir", None):
        overrides["log_dir"] = Path(args.log_dir)
    if getattr(args, "verbose", False):
        overrides["verbose"] = True
    return overrides


def resolve_settings(
    args: argparse.Namespace,
    config: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> RunSettings:
    """
    Layer run settings: defaults < ``run`` config section < ``HMMPATH_*`` environment < CLI flags.

    Raises
    ------
    ConfigError
        An invalid mode or flag value in the config file or the environment.
    """
    layers = (_from_config(config), _from_env(os.environ if environ is None else environ), _from_args(args))
    settings = RunSettings()
    for overrides in layers:
        settings = replace(settings, **overrides)
    return settings


def start_run(args: argparse.Namespace, config: Mapping[str, Any]) -> RunReport:
    settings = resolve_settings(args, config)
    logger, events = configure_logging(settings)
    return RunReport(settings, logger, events)
