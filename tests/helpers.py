from typing import Iterable, List

from multipage_flow.domain.models import DecisionNode, FlatNode, Page


def page(page_id: str, **overrides) -> Page:
    """Page that is incomplete unless told otherwise."""
    overrides.setdefault("is_complete", lambda data: False)
    return Page(id=page_id, **overrides)


def decision(node_id: str, **overrides) -> DecisionNode:
    return DecisionNode(id=node_id, **overrides)


def ids(pages: Iterable[FlatNode]) -> List[str]:
    return [p.id for p in pages]
