"""
Sequence Visualizer.

Prints the progress outline and the traversal path of a sample sequence
for the form data in a JSON file.

Usage:
    python -m multipage_flow.scripts.visualize_sequence [data.json] [sequence_name]

Without a data file the sequence is followed for empty data.
"""

import json
import sys
from pathlib import Path

from multipage_flow.data.sample_sequences import SAMPLE_SEQUENCES
from multipage_flow.execution.engine import MultiPageForm
from multipage_flow.logging_config import setup_logging
from multipage_flow.visualization import render_outline, render_path_diagram


def visualize(data_path: str = None, sequence_name: str = "pet_rock_registration"):
    if sequence_name not in SAMPLE_SEQUENCES:
        raise SystemExit(
            f"Unknown sequence '{sequence_name}'. Available: {', '.join(SAMPLE_SEQUENCES)}"
        )
    pages = SAMPLE_SEQUENCES[sequence_name]
    data = json.loads(Path(data_path).read_text(encoding="utf-8")) if data_path else {}

    # The page a resumed session would open on.
    form = MultiPageForm(get_current_data=lambda: data, pages=pages)

    print(f"Sequence: {sequence_name}")
    print()
    print(render_outline(pages, data, current_page_id=form.current_page_id))
    print(render_path_diagram(pages, data, current_page_id=form.current_page_id))


if __name__ == "__main__":
    setup_logging()
    visualize(*sys.argv[1:3])
