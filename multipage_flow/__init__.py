"""
Multipage Flow

A navigation engine for multi-step, conditionally-branching forms: nested
page sequences are flattened into one addressable list, and a deterministic
state machine moves through it honoring requiredness, completeness,
validation gates, explicit branches and decision nodes.
"""

from multipage_flow.domain import (
    DecisionNode,
    Page,
    Sequence,
    SequenceChild,
    StartingPage,
)
from multipage_flow.state import NavigationState
from multipage_flow.schemas import NavigationSnapshot
from multipage_flow.execution.schemas import StateMachineTransition, TransitionMeta
from multipage_flow.execution import (
    MultiPageForm,
    NavigationConfigError,
    NavigationLoopError,
    PageNotFoundError,
    flatten_pages,
    follow_sequence,
    get_next_page_index,
)
from multipage_flow.forms import (
    FormStateAdapter,
    PydanticFormAdapter,
    create_form_navigator,
)

__all__ = [
    # Domain Layer
    "DecisionNode",
    "Page",
    "Sequence",
    "SequenceChild",
    "StartingPage",
    # State Layer
    "NavigationState",
    # Schemas
    "NavigationSnapshot",
    "StateMachineTransition",
    "TransitionMeta",
    # Execution Layer
    "MultiPageForm",
    "NavigationConfigError",
    "NavigationLoopError",
    "PageNotFoundError",
    "flatten_pages",
    "follow_sequence",
    "get_next_page_index",
    # Forms Layer
    "FormStateAdapter",
    "PydanticFormAdapter",
    "create_form_navigator",
]
