"""
Visualization - Progress Rendering

Renders a page tree as a status outline and the simulated traversal as a
Mermaid flowchart, using Jinja2 templates.
"""

from multipage_flow.visualization.progress import (
    OutlineNode,
    build_outline,
    humanize_id,
    render_outline,
    render_path_diagram,
)

__all__ = [
    "OutlineNode",
    "build_outline",
    "humanize_id",
    "render_outline",
    "render_path_diagram",
]
