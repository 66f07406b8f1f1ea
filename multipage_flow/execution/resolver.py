"""
Resolver - Next Page Resolution

Pure functions that decide where forward navigation goes from a given index
of the flattened list. Both the engine and the traversal simulator route
through get_next_page_index, so a page graph behaves identically when it is
navigated interactively and when it is followed statically.

Resolution order:
1. Nothing past an out-of-range index or a final page.
2. A branch selector (alternate_next_page on a page, select_next_page on a
   required decision node) overrides document order. A missing target is a
   configuration error.
3. Otherwise the next required entry in document order.
Decision nodes are always passed through. In "to next incomplete" mode,
complete pages are passed through as well. Every id touched is recorded so
a cyclic configuration raises instead of spinning.
"""

from typing import List, Optional, Sequence, Set

from ..domain.models import Data, FlatNode
from .exceptions import NavigationLoopError, PageNotFoundError


def is_required(node: FlatNode, data: Data) -> bool:
    """Only an explicit False makes a node not required."""
    if node.is_required is None:
        return True
    return node.is_required(data) is not False


def is_final(node: FlatNode, data: Data) -> bool:
    if node.kind != "page" or node.is_final is None:
        return False
    return bool(node.is_final(data))


def is_decision_node(node: Optional[FlatNode]) -> bool:
    return node is not None and node.kind == "decision"


def find_page_index(pages: Sequence[FlatNode], page_id: str) -> Optional[int]:
    """Index of the first entry with the given effective id, or None."""
    for index, page in enumerate(pages):
        if page.id == page_id:
            return index
    return None


def _branch_target(node: FlatNode, data: Data) -> Optional[str]:
    if node.kind == "decision":
        if node.select_next_page is None:
            return None
        return node.select_next_page(data)
    if node.alternate_next_page is None:
        return None
    return node.alternate_next_page(data)


class _LoopGuard:
    """Path of ids walked during one resolution."""

    def __init__(self, start_id: str):
        self.path: List[str] = [start_id]
        self._seen: Set[str] = {start_id}

    def visit(self, page_id: str):
        self.path.append(page_id)
        if page_id in self._seen:
            raise NavigationLoopError(page_id, self.path)
        self._seen.add(page_id)


def get_next_page_index(
    data: Data,
    pages: Sequence[FlatNode],
    current_index: int,
    to_next_incomplete: bool = False,
) -> Optional[int]:
    """
    Compute the index forward navigation should move to.

    Args:
        data: Current form data snapshot.
        pages: Flattened page list.
        current_index: Index navigation starts from.
        to_next_incomplete: Pass over pages that are already complete.

    Returns:
        The index of the next page, or None when there is nowhere to go.

    Raises:
        PageNotFoundError: A branch selector named a page that does not exist.
        NavigationLoopError: The walk came back to a page it already visited.
    """
    if current_index < 0 or current_index >= len(pages):
        return None
    start = pages[current_index]
    if is_final(start, data):
        return None

    guard = _LoopGuard(start.id)

    def passes_through(node: FlatNode) -> bool:
        if node.kind == "decision":
            return True
        return to_next_incomplete and bool(node.is_complete(data))

    index = current_index
    while True:
        node = pages[index]

        # The current page branches even if it has since become not required.
        may_branch = (index == current_index and node.kind == "page") or is_required(
            node, data
        )
        target_id = _branch_target(node, data) if may_branch else None
        if target_id:
            guard.visit(target_id)
            target_index = find_page_index(pages, target_id)
            if target_index is None:
                raise PageNotFoundError(target_id)
            target = pages[target_index]
            if not passes_through(target):
                return target_index
            if is_final(target, data):
                return None
            index = target_index
            continue

        next_index = index + 1
        if next_index >= len(pages):
            return None
        next_node = pages[next_index]
        guard.visit(next_node.id)
        if is_required(next_node, data):
            if not passes_through(next_node):
                return next_index
            if is_final(next_node, data):
                return None
        index = next_index
