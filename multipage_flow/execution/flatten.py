"""
Flattening - Nested Tree to Addressable List

Sequences only exist to group pages and gate them together. Navigation works
on a single ordered list, so each Sequence is replaced in place by its
children, re-identified with the dot-joined path of their ancestors and with
requiredness composed from every ancestor (logical AND).
"""

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from ..domain.models import Data, FlatNode, Predicate, SequenceChild

ID_SEPARATOR = "."


def _compose_required(
    ancestor: Optional[Predicate], own: Optional[Predicate]
) -> Predicate:
    """AND the ancestors' gate with the node's own predicate, ancestors first."""

    def is_required(data: Data) -> Optional[bool]:
        if ancestor is not None and ancestor(data) is False:
            return False
        if own is not None:
            return own(data)
        return True

    return is_required


def flatten_pages(
    children: Iterable[SequenceChild],
) -> Tuple[List[FlatNode], Dict[str, SequenceChild]]:
    """
    Flatten a tree of pages, sequences and decision nodes.

    Input nodes are never mutated: every flat entry is a copy carrying the
    effective id and the composed is_required predicate. Nothing is dropped
    even if it can never be required, since requiredness is evaluated against
    data that changes over time.

    Args:
        children: Top-level list of the tree.

    Returns:
        (flat_list, originals) where originals maps each effective id to the
        caller-supplied node it was built from.
    """
    flat: List[FlatNode] = []
    originals: Dict[str, SequenceChild] = {}
    _flatten_into(children, "", None, flat, originals)
    return flat, originals


def _flatten_into(
    children: Iterable[SequenceChild],
    prefix: str,
    ancestor_required: Optional[Predicate],
    flat: List[FlatNode],
    originals: Dict[str, SequenceChild],
) -> None:
    for child in children:
        effective_id = f"{prefix}{child.id}"
        is_required = _compose_required(ancestor_required, child.is_required)

        if child.kind == "sequence":
            _flatten_into(
                child.pages,
                f"{effective_id}{ID_SEPARATOR}",
                is_required,
                flat,
                originals,
            )
        elif child.kind in ("page", "decision"):
            flat.append(replace(child, id=effective_id, is_required=is_required))
            originals.setdefault(effective_id, child)
        else:
            raise TypeError(f"Unknown node kind '{child.kind}' for '{child.id}'")
