"""
Capture plan - screenshot requests proposed by the research model.
"""

from typing import Any, Optional
from pydantic import Field, ValidationError

from .base import DomainModel, TimestampMixin

DEFAULT_VIEWPORT_WIDTH = 1280
DEFAULT_VIEWPORT_HEIGHT = 720

# Plan fields the worker no longer honours
LEGACY_FIELDS = ("crop_mode", "selector", "text_pattern")


def _as_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


class Viewport(DomainModel):
    width: int = DEFAULT_VIEWPORT_WIDTH
    height: int = DEFAULT_VIEWPORT_HEIGHT

    @classmethod
    def from_value(cls, value: Any) -> "Viewport":
        """Lenient parse - bad or missing dimensions fall back to defaults."""
        if not isinstance(value, dict):
            return cls()
        return cls(
            width=_as_int(value.get("width"), DEFAULT_VIEWPORT_WIDTH),
            height=_as_int(value.get("height"), DEFAULT_VIEWPORT_HEIGHT),
        )


class CaptureRequest(DomainModel):
    """
    One screenshot to take.

    caption is client-facing (shown under the image); notes are
    internal cropping hints and never leave the backend.
    """
    id: str = Field(min_length=1)
    url: str = Field(min_length=1)
    caption: str = ""
    notes: str = ""
    device: str = "desktop"  # 'desktop' | 'mobile'
    viewport: Viewport = Field(default_factory=Viewport)
    group_id: Optional[str] = None
    crop_mode: Optional[str] = None  # Legacy plans only

    @classmethod
    def from_record(cls, record: Any) -> Optional["CaptureRequest"]:
        """Build from a raw plan record. None if it has no usable id or url."""
        if not isinstance(record, dict):
            return None
        shot_id = record.get("id")
        url = record.get("url")
        if not isinstance(shot_id, (str, int)) or not isinstance(url, str):
            return None

        device = str(record.get("device") or "desktop").lower()
        try:
            return cls(
                id=str(shot_id),
                url=url,
                caption=str(record.get("purpose") or record.get("caption") or ""),
                notes=str(record.get("notes") or ""),
                device=device if device in ("desktop", "mobile") else "desktop",
                viewport=Viewport.from_value(record.get("viewport")),
                group_id=record.get("group_id") if isinstance(record.get("group_id"), str) else None,
                crop_mode=record.get("crop_mode") if isinstance(record.get("crop_mode"), str) else None,
            )
        except ValidationError:
            return None


class CapturePlan(DomainModel):
    """
    Aggregated capture records from all research passes.

    Records stay raw (dicts) in arrival order. Duplicate ids are kept;
    validation happens at dispatch time.
    """
    records: list[dict] = Field(default_factory=list)

    def merge(self, records: list[dict]) -> None:
        self.records.extend(records)

    def is_empty(self) -> bool:
        return not self.records

    def __len__(self) -> int:
        return len(self.records)


class StoredCapture(TimestampMixin):
    """A resolved screenshot persisted for an audit."""
    image_url: str
    shot: dict = Field(default_factory=dict)

    def to_record(self) -> dict:
        return {
            "image_url": self.image_url,
            "meta": {
                "created_at": self.created_at.isoformat(),
                "shot": self.shot,
            },
        }

    @classmethod
    def from_record(cls, record: Any) -> Optional["StoredCapture"]:
        if not isinstance(record, dict) or not record.get("image_url"):
            return None
        meta = record.get("meta") if isinstance(record.get("meta"), dict) else {}
        data = {"image_url": record["image_url"], "shot": meta.get("shot") or {}}
        if meta.get("created_at"):
            data["created_at"] = meta["created_at"]
        try:
            return cls.model_validate(data)
        except ValidationError:
            return None
