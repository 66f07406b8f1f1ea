"""
Sequence Follower - Static Traversal

Walks a page tree end to end for one fixed data snapshot, using the same
resolution rules as interactive navigation, and reports the pages a user
would see. Nothing is called except predicates and branch selectors, so it
is safe to run in tests and when drawing a progress map.
"""

import logging
from typing import List, Set, Union

from ..domain.models import Data, Page, Sequence, SequenceChild
from .exceptions import NavigationLoopError
from .flatten import flatten_pages
from .resolver import get_next_page_index, is_decision_node, is_final

logger = logging.getLogger(__name__)


def follow_sequence(
    sequence: Union[List[SequenceChild], Sequence],
    data: Data,
) -> List[Page]:
    """
    Follow a sequence of pages for the given data.

    Args:
        sequence: Top-level list of children, or a Sequence whose pages are followed.
        data: The data to evaluate predicates against.

    Returns:
        The flattened pages visited, in order, with effective ids.
        Decision nodes route but are never part of the result.

    Raises:
        PageNotFoundError: A branch selector named a page that does not exist.
        NavigationLoopError: The walk reached a page it already visited.
    """
    if isinstance(sequence, Sequence):
        sequence = sequence.pages
    pages, _ = flatten_pages(sequence)

    visited: List[Page] = []
    path: List[str] = []
    seen: Set[str] = set()

    index = 0 if pages else None
    while index is not None:
        node = pages[index]

        # A leading decision node is only a routing point.
        if not (index == 0 and is_decision_node(node)):
            path.append(node.id)
            if node.id in seen:
                raise NavigationLoopError(node.id, path)
            seen.add(node.id)

        if not is_decision_node(node):
            visited.append(node)
            if is_final(node, data):
                break

        index = get_next_page_index(data, pages, index, False)

    logger.debug(f"Followed sequence: {' -> '.join(path)}")
    return visited
