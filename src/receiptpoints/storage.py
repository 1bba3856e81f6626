from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Protocol

from .config import Settings
from .errors import ScoreConflictError
from .ids import is_receipt_id

logger = logging.getLogger(__name__)


class ScoreStore(Protocol):
    def put(self, receipt_id: str, points: int) -> None: ...

    def get(self, receipt_id: str) -> int | None: ...


class InMemoryScoreStore:
    """Volatile store; bindings live as long as the process."""

    def __init__(self) -> None:
        self._points: dict[str, int] = {}
        self._lock = threading.Lock()

    def put(self, receipt_id: str, points: int) -> None:
        with self._lock:
            if receipt_id in self._points:
                raise ScoreConflictError(receipt_id)
            self._points[receipt_id] = points

    def get(self, receipt_id: str) -> int | None:
        with self._lock:
            return self._points.get(receipt_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)


class JsonFileScoreStore:
    """One ``<id>.json`` file per scored receipt under ``<data_dir>/points``."""

    def __init__(self, data_dir: Path) -> None:
        self.points_dir = data_dir / "points"
        self.points_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def put(self, receipt_id: str, points: int) -> None:
        path = self._path(receipt_id)
        if path is None:
            raise ValueError(f"Not a receipt id: {receipt_id!r}")
        with self._lock:
            if path.exists():
                raise ScoreConflictError(receipt_id)
            write_json(path, {"id": receipt_id, "points": points})

    def get(self, receipt_id: str) -> int | None:
        path = self._path(receipt_id)
        if path is None or not path.exists():
            return None
        data = json.loads(path.read_text(encoding="utf-8"))
        return int(data["points"])

    def _path(self, receipt_id: str) -> Path | None:
        # Only well-formed ids map to files; anything else is simply unknown.
        if not is_receipt_id(receipt_id):
            return None
        return self.points_dir / f"{receipt_id}.json"


def write_json(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def create_score_store(settings: Settings) -> ScoreStore:
    if settings.store == "json":
        logger.info("Using JSON file score store at %s", settings.data_dir)
        return JsonFileScoreStore(settings.data_dir)
    logger.info("Using in-memory score store")
    return InMemoryScoreStore()
