"""Persisted title model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from pytitle._constants import TITLE_ROW_ID


class Title(BaseModel):
    """The title fetched from the network.

    Only one row ever exists: ``id`` is pinned to :data:`TITLE_ROW_ID`
    and every write replaces it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str
    id: int = TITLE_ROW_ID

    @field_validator("id")
    @classmethod
    def _pin_row_id(cls, value: int) -> int:
        if value != TITLE_ROW_ID:
            raise ValueError(f"title id must be {TITLE_ROW_ID}")
        return value
