"""Artifact writing utilities."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Sequence

import numpy as np


def save_path(path_indices: Sequence[int], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    np.save(path, np.asarray(path_indices, dtype=int))


def save_json(data: Any, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))


def dump_decode_report(out_dir: Path, stem: str, report: Mapping[str, Any]) -> Path:
    """Write a deterministic decode report JSON under ``<out_dir>/decode``."""

    path = out_dir / "decode" / f"{stem}_report.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(dict(report), indent=2, sort_keys=True))
    return path
