from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOGGER_PREFIX = "astarkit"


def get_logger(name: str, logs_dir: Optional[Path] = None, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(f"{LOGGER_PREFIX}.{name}")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if logs_dir is None or logger.handlers:
        return logger
    logs_dir = Path(logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(logs_dir / f"{name}.log")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)
    return logger


class EventLogger:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def record(self, event: Dict[str, Any]) -> None:
        payload = dict(event)
        payload.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
        line = json.dumps(payload, sort_keys=True, ensure_ascii=True, default=repr)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")


class NullEventLogger:
    def record(self, event: Dict[str, Any]) -> None:
        return


def get_event_logger(logs_dir: Optional[Path]) -> EventLogger | NullEventLogger:
    if logs_dir is None:
        return NullEventLogger()
    return EventLogger(Path(logs_dir) / "events.jsonl")
