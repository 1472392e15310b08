"""Base model for depositvault value types."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class VaultModel(BaseModel):
    """Immutable base model with common configuration."""

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VaultModel":
        """Create model from dictionary."""
        return cls.model_validate(data)
