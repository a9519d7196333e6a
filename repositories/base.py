"""
Repository base classes - define the interface.
"""

from abc import ABC, abstractmethod

from models import StoredCapture


class RepositoryError(RuntimeError):
    """Stored data exists but cannot be read safely."""


class CounterRepository(ABC):
    """Named integer sequences that survive across runs."""

    @abstractmethod
    def peek(self, name: str, floor: int = 0) -> int:
        """Value the next allocation would return (never below floor)."""
        pass

    @abstractmethod
    def next_value(self, name: str, floor: int = 0) -> int:
        """
        Allocate a value: return the stored counter (clamped to floor)
        and persist counter + 1 in one read-modify-write.

        Raises RepositoryError if the stored sequence cannot be read;
        an allocator must never restart a sequence it cannot see.
        """
        pass


class CaptureRepository(ABC):
    """Resolved screenshots per audit, keyed by capture request id."""

    @abstractmethod
    def get_for_audit(self, audit_id: str) -> dict[str, StoredCapture]:
        """
        All stored captures for an audit (empty dict if none).

        Raises RepositoryError if the stored map exists but is unreadable.
        """
        pass

    @abstractmethod
    def save_for_audit(self, audit_id: str, captures: dict[str, StoredCapture]) -> None:
        """Replace the stored capture map for an audit."""
        pass

    def image_urls(self, audit_id: str) -> dict[str, str]:
        """Capture id -> image URL, for placeholder resolution."""
        return {shot_id: c.image_url for shot_id, c in self.get_for_audit(audit_id).items()}


class Repository(ABC):
    """
    Aggregate repository - provides access to all entity repositories.

    This is what consumers use. Backend implementations provide
    concrete versions of each sub-repository.
    """

    @property
    @abstractmethod
    def counters(self) -> CounterRepository:
        """Access counter repository."""
        pass

    @property
    @abstractmethod
    def captures(self) -> CaptureRepository:
        """Access capture repository."""
        pass
