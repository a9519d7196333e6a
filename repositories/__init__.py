"""
Repository layer - abstracts persistence.

Usage:
    from repositories import get_repository

    repo = get_repository()  # Returns configured backend
    audit_number = repo.counters.next_value("report_counter", floor=120)
    repo.captures.get_for_audit("AR-0120")

Backends are swappable via config.
"""

from pathlib import Path
from typing import Optional

from .base import Repository, CounterRepository, CaptureRepository, RepositoryError
from .json_backend import JsonRepository
from .memory_backend import MemoryRepository

# Default backend - can be changed via config
_backend: str = "json"
_base_path: Optional[Path] = None
_instance: Repository = None


def get_repository() -> Repository:
    """Get the configured repository instance."""
    global _instance

    if _instance is None:
        if _backend == "json":
            _instance = JsonRepository(_base_path)
        elif _backend == "memory":
            _instance = MemoryRepository()
        else:
            raise ValueError(f"Unknown backend: {_backend}")

    return _instance


def configure_backend(backend: str, base_path: Optional[Path] = None) -> None:
    """Configure the repository backend."""
    global _backend, _base_path, _instance
    _backend = backend
    _base_path = Path(base_path) if base_path else None
    _instance = None  # Force re-initialization


__all__ = [
    "get_repository",
    "configure_backend",
    "Repository",
    "CounterRepository",
    "CaptureRepository",
    "RepositoryError",
    "JsonRepository",
    "MemoryRepository",
]
