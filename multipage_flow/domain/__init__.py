"""
Domain Layer - Static Data Models

Defines the declarative form tree: Pages, Sequences and DecisionNodes,
plus the predicate and hook signatures they carry.
"""

from multipage_flow.domain.models import (
    Data,
    DecisionNode,
    ErrorList,
    FlatNode,
    NodeKind,
    Page,
    PageSelector,
    Predicate,
    Sequence,
    SequenceChild,
    StartingPage,
    Validator,
)

__all__ = [
    "Data",
    "DecisionNode",
    "ErrorList",
    "FlatNode",
    "NodeKind",
    "Page",
    "PageSelector",
    "Predicate",
    "Sequence",
    "SequenceChild",
    "StartingPage",
    "Validator",
]
