"""
JSON file backend - stores data as JSON files.

Directory structure:
    {data_dir}/
        counters.json            - Named sequences (audit ids)
        captures/{audit_id}.json - Resolved screenshots per audit
"""

import json
import logging
import re
import threading
from pathlib import Path
from typing import Optional

from config import DATA_DIR
from models import StoredCapture
from .base import Repository, CounterRepository, CaptureRepository, RepositoryError

logger = logging.getLogger(__name__)

SAFE_NAME_RE = re.compile(r"[^A-Za-z0-9_.-]")


class WriteQueue:
    """Thread-safe write serialization."""

    def __init__(self):
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def write_json(self, path: Path, data: dict) -> None:
        """Atomic JSON write."""
        with self._lock:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp = path.with_suffix(".json.tmp")
            with open(temp, "w") as f:
                json.dump(data, f, indent=2, default=str)
            temp.replace(path)


_write_queue = WriteQueue()


def _read_json(path: Path) -> dict:
    """
    Read one JSON object file. Missing file -> {}.

    Raises RepositoryError on unreadable content: callers write back
    what they read, so treating it as empty would overwrite real data.
    """
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RepositoryError(f"Corrupt JSON file {path}: {e}") from e
    if not isinstance(data, dict):
        raise RepositoryError(f"{path} must contain a JSON object, got {type(data).__name__}")
    return data


class JsonCounterRepository(CounterRepository):
    """JSON file implementation of counter repository."""

    def __init__(self, base_path: Path = None):
        self._base_path = base_path or DATA_DIR

    @property
    def _path(self) -> Path:
        return self._base_path / "counters.json"

    def _current(self, data: dict, name: str, floor: int) -> int:
        try:
            value = int(data.get(name, floor))
        except (TypeError, ValueError) as e:
            raise RepositoryError(f"Counter {name} holds a non-integer value {data.get(name)!r}") from e
        return max(value, floor)

    def peek(self, name: str, floor: int = 0) -> int:
        return self._current(_read_json(self._path), name, floor)

    def next_value(self, name: str, floor: int = 0) -> int:
        # Read and write under one lock so two runs in this process never share a value
        with _write_queue.lock:
            data = _read_json(self._path)
            value = self._current(data, name, floor)
            data[name] = value + 1
            _write_queue.write_json(self._path, data)
        return value


class JsonCaptureRepository(CaptureRepository):
    """JSON file implementation of capture repository."""

    def __init__(self, base_path: Path = None):
        self._base_path = base_path or DATA_DIR

    def _capture_file(self, audit_id: str) -> Path:
        return self._base_path / "captures" / f"{SAFE_NAME_RE.sub('_', audit_id)}.json"

    def get_for_audit(self, audit_id: str) -> dict[str, StoredCapture]:
        captures = {}
        for shot_id, record in _read_json(self._capture_file(audit_id)).items():
            stored = StoredCapture.from_record(record)
            if stored is None:
                logger.warning("Skipping unreadable capture %s for audit %s", shot_id, audit_id)
                continue
            captures[shot_id] = stored
        return captures

    def save_for_audit(self, audit_id: str, captures: dict[str, StoredCapture]) -> None:
        data = {shot_id: c.to_record() for shot_id, c in captures.items()}
        _write_queue.write_json(self._capture_file(audit_id), data)


class JsonRepository(Repository):
    """JSON file backend implementation."""

    def __init__(self, base_path: Optional[Path] = None):
        self._base_path = Path(base_path) if base_path else DATA_DIR
        self._counters = JsonCounterRepository(self._base_path)
        self._captures = JsonCaptureRepository(self._base_path)

    @property
    def counters(self) -> CounterRepository:
        return self._counters

    @property
    def captures(self) -> CaptureRepository:
        return self._captures
