"""
Domain Layer - Static Data Models

This module defines the declarative description of a multi-page form: the
Pages a user fills in, the Sequences that group them, and the DecisionNodes
that only redirect flow. The tree is built once by the caller and treated
as immutable for the lifetime of a navigation session.

Every predicate is a plain callable of the current (possibly partial) form
data. Predicates are evaluated lazily on every navigation decision, never
at construction time, because the data they look at keeps changing.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, List, Literal, Optional, Union

"""
NodeKind is the explicit discriminant of the tree union:
- page: a rendered step holding fields
- sequence: a named, ordered group of pages/sequences/decisions
- decision: a non-rendered routing step
"""
NodeKind = Literal["page", "sequence", "decision"]

# Form data as returned by the host's get_current_data(). Opaque to the engine.
Data = Any

# The error-list shape is owned by the host validator; it is forwarded verbatim.
ErrorList = Any

Predicate = Callable[[Data], Optional[bool]]
PageSelector = Callable[[Data], Optional[str]]
Validator = Callable[[Data], Optional[ErrorList]]
ArriveHook = Callable[[Data], None]
ExitHook = Callable[[Data], Optional[Awaitable[None]]]


class StartingPage(Enum):
    """Sentinels accepted as ``starting_page`` besides an explicit page id."""

    FIRST_INCOMPLETE = 1
    FIRST_PAGE = 2


@dataclass
class Page:
    """
    A single addressable step of the form.

    Attributes:
        id: Identifier, unique once the tree is flattened.
        is_complete: Loose completeness check (no validation). Drives the
            "first incomplete" start and advance_to_next_incomplete.
        is_required: Whether the page applies to the current data. Only an
            explicit False skips the page; None or a missing predicate means
            required.
        is_final: True halts forward navigation at this page.
        validate: Returns an error list (truthy) to block advance, or None.
        alternate_next_page: Returns the id of a page to jump to instead of
            the next page in document order, or None for the default.
        on_arrive: Called after the page becomes current.
        on_exit: Called (and awaited if it returns an awaitable) before
            advance leaves the page.
        component: Opaque rendering handle for the presentation layer.
    """

    id: str
    is_complete: Predicate
    is_required: Optional[Predicate] = None
    is_final: Optional[Predicate] = None
    validate: Optional[Validator] = None
    alternate_next_page: Optional[PageSelector] = None
    on_arrive: Optional[ArriveHook] = None
    on_exit: Optional[ExitHook] = None
    component: Any = None
    kind: Literal["page"] = field(default="page", init=False)


@dataclass
class DecisionNode:
    """
    A routing step that is never rendered.

    When required, ``select_next_page`` picks the next page by id; a None
    result falls through to the next element in document order.
    """

    id: str
    select_next_page: Optional[PageSelector] = None
    is_required: Optional[Predicate] = None
    kind: Literal["decision"] = field(default="decision", init=False)


@dataclass
class Sequence:
    """
    Named, ordered group of children.

    A sequence's is_required gates all of its descendants: when it returns
    False every descendant is treated as not required. Descendant ids are
    prefixed with the sequence id (``sequence.child``).
    """

    id: str
    pages: List["SequenceChild"] = field(default_factory=list)
    is_required: Optional[Predicate] = None
    kind: Literal["sequence"] = field(default="sequence", init=False)


SequenceChild = Union[Page, Sequence, DecisionNode]

# Entry of the flattened list: sequences never survive flattening.
FlatNode = Union[Page, DecisionNode]
