"""Project config (``hmmpath.yaml``) and the per-run settings derived from it."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml

CONFIG_FILES = ("hmmpath.yaml", "config.yaml")
RUN_MODES = ("debug", "run")

RunMode = Literal["debug", "run"]

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


class ConfigError(ValueError):
    """Raised when required runtime configuration is missing or invalid."""


def load_config(root: Path) -> dict[str, Any]:
    """Read the first of ``hmmpath.yaml`` / ``config.yaml`` under ``root``; ``{}`` if neither exists."""

    path = next((root / name for name in CONFIG_FILES if (root / name).exists()), None)
    if path is None:
        return {}
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path.name} must be a YAML mapping at top level.")
    return raw


def config_section(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping.")
    return section


def resolve_out_dir(config: Mapping[str, Any], cli_out_dir: Path | None) -> Path | None:
    """
    Directory for decode artifacts: ``--out-dir``, else ``paths.out_dir``, else ``io.out_dir``.

    None means no artifacts are written.
    """

    if cli_out_dir is not None:
        return cli_out_dir
    for name in ("paths", "io"):
        out_dir = config_section(config, name).get("out_dir")
        if isinstance(out_dir, str) and out_dir.strip():
            return Path(out_dir.strip())
    return None


def parse_mode(value: Any, *, source: str) -> RunMode:
    mode = str(value).strip().lower()
    if mode not in RUN_MODES:
        raise ConfigError(f"{source} must be 'debug' or 'run', got {value!r}.")
    return mode  # type: ignore[return-value]


def parse_flag(value: Any, *, source: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{source} must be a boolean flag, got {value!r}.")


def new_run_id() -> str:
    return uuid.uuid4().hex[:10]


@dataclass(frozen=True)
class RunSettings:
    """
    How a CLI run handles failures and where it logs.

    ``mode="debug"`` re-raises the first step failure; ``mode="run"`` records it,
    skips the steps that needed its result and exits with status 1 at the end.
    The run id is fixed at construction so every log file of a run shares it.
    """

    mode: RunMode = "run"
    log_dir: Path = Path("logs")
    write_jsonl: bool = True
    verbose: bool = False
    run_id: str = field(default_factory=new_run_id)

    @property
    def log_file(self) -> Path:
        return self.log_dir / f"run_{self.run_id}.log"

    @property
    def events_file(self) -> Path:
        return self.log_dir / f"events_{self.run_id}.jsonl"
