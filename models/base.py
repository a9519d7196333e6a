"""
Base model classes.
"""

from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class TimestampMixin(BaseModel):
    """Mixin for a creation timestamp."""
    created_at: datetime = Field(default_factory=datetime.now)


class DomainModel(BaseModel):
    """
    Base for all domain models.

    Unknown fields are ignored so model output and legacy data
    never break validation.
    """
    model_config = ConfigDict(
        extra="ignore",
        str_strip_whitespace=True,
    )


class FrozenModel(DomainModel):
    """Immutable value object."""
    model_config = ConfigDict(
        extra="ignore",
        str_strip_whitespace=True,
        frozen=True,
    )
