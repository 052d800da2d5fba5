from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from rich.logging import RichHandler

from .config import RunSettings

LOGGER_NAME = "hmmpath"
FILE_FORMAT = "%(asctime)s | run=%(run_id)s | step=%(step)s | %(levelname)s | %(message)s"


class EventLog:
    """
    One JSON object per line in ``<log_dir>/events_<run_id>.jsonl``.

    Every event carries ``time_utc``, ``run_id``, ``event`` and ``step``; extra
    keyword fields are added as given, paths as strings.
    """

    def __init__(self, path: Path, run_id: str) -> None:
        self.path = path
        self.run_id = run_id

    def emit(self, event: str, step: Optional[str] = None, **fields: Any) -> None:
        payload: dict[str, Any] = {
            "time_utc": datetime.now(timezone.utc).isoformat(),
            "run_id": self.run_id,
            "event": event,
            "step": step,
        }
        payload.update({k: str(v) if isinstance(v, Path) else v for k, v in fields.items() if v is not None})
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")


class _RunFields(logging.Filter):
    """Give every record the ``run_id`` and ``step`` the file format prints."""

    def __init__(self, run_id: str) -> None:
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.run_id = self.run_id
        if not hasattr(record, "step"):
            record.step = "-"
        return True


def configure_logging(settings: RunSettings) -> tuple[logging.Logger, Optional[EventLog]]:
    """
    Point the ``hmmpath`` logger at this run: Rich on the console (INFO, or DEBUG
    with ``verbose``) and everything down to DEBUG in ``settings.log_file``.

    Handlers from an earlier run in the same process are closed first.
    """
    settings.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    for old in list(logger.filters):
        logger.removeFilter(old)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addFilter(_RunFields(settings.run_id))

    console = RichHandler(show_path=False, rich_tracebacks=settings.mode == "debug")
    console.setLevel(logging.DEBUG if settings.verbose else logging.INFO)
    logger.addHandler(console)

    log_file = logging.FileHandler(settings.log_file, encoding="utf-8")
    log_file.setLevel(logging.DEBUG)
    log_file.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    logger.addHandler(log_file)

    events = EventLog(settings.events_file, settings.run_id) if settings.write_jsonl else None
    logger.debug("Run %s started (mode=%s, log_dir=%s)", settings.run_id, settings.mode, settings.log_dir)
    return logger, events
