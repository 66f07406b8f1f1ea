"""
State Layer - Runtime Data Models

This module defines the runtime state of one navigation session: the index
of the current entry in the flattened page list and the stack of indices
navigation came from. It is owned exclusively by a MultiPageForm and only
changes through advance / go_back / go_to.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class NavigationState(BaseModel):
    """
    Mutable pointer state of a navigation session.

    Attributes:
        current_page_index: Index into the flattened page list.
        history: Indices left by forward moves (advance, or go_to a later
            page), most recent last. go_back returns to the last entry below
            the current page before falling back to a positional search.
        navigating: In-flight flag set while advance awaits a gate or exit hook.
        started: Whether the initial arrival callbacks have fired.
    """
    current_page_index: int = 0
    history: List[int] = Field(default_factory=list)
    navigating: bool = False
    started: bool = False

    @property
    def last_visited_index(self) -> Optional[int]:
        """Most recent history entry below the current page, if any."""
        for index in reversed(self.history):
            if index < self.current_page_index:
                return index
        return None

    def pop_history_to(self, index: int):
        """Drop history entries down to and including the given index."""
        while self.history and self.history[-1] >= index:
            self.history.pop()
