"""
Jinja2 rendering for the progress views.

Text templates live next to this module; every name in Template must have a
matching file, checked when the package is imported.
"""

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .templates import Template

TEMPLATES_DIR = Path(__file__).parent / "templates"


def mermaid_label(text: str) -> str:
    """Quote-safe text for a Mermaid node label."""
    return str(text).replace('"', "#quot;")


def _check_template_files():
    missing = [
        TEMPLATES_DIR / f"{getattr(Template, name)}.jinja2"
        for name in vars(Template)
        if not name.startswith("_")
    ]
    missing = [path for path in missing if not path.exists()]
    if missing:
        raise FileNotFoundError(f"Visualization templates missing: {missing}")


_check_template_files()


@lru_cache(maxsize=1)
def _environment() -> Environment:
    # Plain text output, so no HTML autoescaping.
    env = Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["mermaid_label"] = mermaid_label
    return env


def render(template_name: str, **context) -> str:
    """
    Render one of the Template names with the given context.

    Raises:
        jinja2.UndefinedError: The template used a variable not in context.
    """
    return _environment().get_template(f"{template_name}.jinja2").render(**context)
