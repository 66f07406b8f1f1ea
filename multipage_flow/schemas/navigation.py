"""
Schemas - Read-only Navigation Snapshot

Pydantic model describing where a navigation session stands, in terms a
presentation layer can render or serialise: effective page ids only, no
callables.
"""
from typing import Optional

from pydantic import BaseModel, Field


class NavigationSnapshot(BaseModel):
    """
    Derived navigation values for the current data, computed on demand by
    MultiPageForm.snapshot().
    """
    current_page_id: Optional[str] = Field(
        None,
        description="Effective (dot-joined) id of the current page. None for an empty form."
    )
    previous_step_id: Optional[str] = Field(
        None,
        description="Page go_back would move to."
    )
    next_step_id: Optional[str] = Field(
        None,
        description="Page advance would move to."
    )
    next_incomplete_step_id: Optional[str] = Field(
        None,
        description="Next required page that is not yet complete."
    )
    is_first: bool = Field(
        ...,
        description="True when there is no previous step."
    )
    is_final: bool = Field(
        ...,
        description="True when the current page is final or there is no next step."
    )
    total_pages: int = Field(
        ...,
        description="Number of entries in the flattened list, decision nodes included."
    )
