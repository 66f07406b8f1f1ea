"""
Execution Layer - Flattening, Resolution and Navigation

Defines the flattener, the pure next-page resolver, the MultiPageForm
navigation state machine and the static sequence follower built on the
same resolver.
"""

from multipage_flow.execution.engine import MultiPageForm
from multipage_flow.execution.exceptions import (
    NavigationConfigError,
    NavigationLoopError,
    PageNotFoundError,
)
from multipage_flow.execution.flatten import flatten_pages
from multipage_flow.execution.follower import follow_sequence
from multipage_flow.execution.resolver import (
    find_page_index,
    get_next_page_index,
    is_decision_node,
    is_required,
)


__all__ = [
    "MultiPageForm",
    "NavigationConfigError",
    "NavigationLoopError",
    "PageNotFoundError",
    "find_page_index",
    "flatten_pages",
    "follow_sequence",
    "get_next_page_index",
    "is_decision_node",
    "is_required",
]
