"""
Progress Visualization

Text renderings of a page tree for a given data snapshot:
- an outline of the nested tree marking complete, pending, not-needed and
  current pages,
- a Mermaid flowchart of the path follow_sequence takes through it.

Both are pure views over the same predicates navigation uses; they never
call hooks or validators.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..domain.models import Data, NodeKind, Predicate, Sequence, SequenceChild
from ..execution.flatten import ID_SEPARATOR
from ..execution.follower import follow_sequence
from .loader import render
from .templates import Template

STATUS_COMPLETE = "[x]"
STATUS_PENDING = "[ ]"
STATUS_NOT_NEEDED = "[-]"
STATUS_DECISION = "<?>"
STATUS_GROUP = "[+]"


def humanize_id(page_id: str) -> str:
    """'rockColor' / 'rock-color' / 'rock_color' -> 'Rock color'-style labels."""
    label = page_id.replace("-", " ").replace("_", " ")
    label = re.sub(r"([A-Z])", r" \1", label).strip()
    label = re.sub(r"\s+", " ", label)
    return label[:1].upper() + label[1:]


@dataclass
class OutlineNode:
    id: str
    label: str
    kind: NodeKind
    required: bool
    complete: bool
    current: bool
    children: List["OutlineNode"] = field(default_factory=list)

    @property
    def status(self) -> str:
        if not self.required:
            return STATUS_NOT_NEEDED
        if self.kind == "decision":
            return STATUS_DECISION
        if self.kind == "sequence":
            return STATUS_COMPLETE if self.complete else STATUS_GROUP
        return STATUS_COMPLETE if self.complete else STATUS_PENDING


@dataclass
class _OutlineRow:
    depth: int
    status: str
    label: str
    current: bool


def _own_required(predicate: Optional[Predicate], data: Data) -> bool:
    return predicate is None or predicate(data) is not False


def _children_of(sequence: Union[List[SequenceChild], Sequence]) -> List[SequenceChild]:
    if isinstance(sequence, Sequence):
        return sequence.pages
    return sequence


def build_outline(
    sequence: Union[List[SequenceChild], Sequence],
    data: Data,
    current_page_id: Optional[str] = None,
    _prefix: str = "",
    _ancestor_required: bool = True,
) -> List[OutlineNode]:
    """
    Evaluate the tree against data, keeping its nesting.

    Requiredness is composed with the ancestors exactly as the flattener
    does; a sequence is complete when every required page below it is.
    """
    nodes: List[OutlineNode] = []
    for child in _children_of(sequence):
        effective_id = f"{_prefix}{child.id}"
        required = _ancestor_required and _own_required(child.is_required, data)

        if child.kind == "sequence":
            children = build_outline(
                child.pages,
                data,
                current_page_id,
                f"{effective_id}{ID_SEPARATOR}",
                required,
            )
            complete = required and all(
                node.complete or not node.required or node.kind == "decision"
                for node in children
            )
            nodes.append(
                OutlineNode(
                    id=effective_id,
                    label=humanize_id(child.id),
                    kind="sequence",
                    required=required,
                    complete=complete,
                    current=False,
                    children=children,
                )
            )
            continue

        complete = child.kind == "page" and required and bool(child.is_complete(data))
        nodes.append(
            OutlineNode(
                id=effective_id,
                label=humanize_id(child.id),
                kind=child.kind,
                required=required,
                complete=complete,
                current=child.kind == "page" and effective_id == current_page_id,
            )
        )
    return nodes


def _rows(nodes: List[OutlineNode], depth: int = 0) -> List[_OutlineRow]:
    rows: List[_OutlineRow] = []
    for node in nodes:
        rows.append(_OutlineRow(depth, node.status, node.label, node.current))
        rows.extend(_rows(node.children, depth + 1))
    return rows


def render_outline(
    sequence: Union[List[SequenceChild], Sequence],
    data: Data,
    current_page_id: Optional[str] = None,
) -> str:
    """Render the nested outline, one line per node."""
    rows = _rows(build_outline(sequence, data, current_page_id))
    return render(Template.SEQUENCE_OUTLINE, rows=rows)


def render_path_diagram(
    sequence: Union[List[SequenceChild], Sequence],
    data: Data,
    current_page_id: Optional[str] = None,
) -> str:
    """Render the simulated traversal as a Mermaid flowchart."""
    visited = follow_sequence(sequence, data)
    nodes = [
        {"label": humanize_id(page.id.split(ID_SEPARATOR)[-1])}
        for page in visited
    ]
    edges = [(index, index + 1) for index in range(len(visited) - 1)]
    current_index = next(
        (index for index, page in enumerate(visited) if page.id == current_page_id),
        None,
    )
    return render(
        Template.PATH_DIAGRAM,
        nodes=nodes,
        edges=edges,
        current_index=current_index,
    )
