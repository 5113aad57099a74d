"""Pydantic models for pytitle."""

from pytitle.models.title import Title
from pytitle.models.ui_state import UiState

__all__ = [
    "Title",
    "UiState",
]
