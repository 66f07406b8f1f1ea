"""
Schemas - Serialisable Navigation Models

Defines the Pydantic models a presentation layer consumes to render the
current state of a multi-page form.
"""

from multipage_flow.schemas.navigation import NavigationSnapshot

__all__ = [
    "NavigationSnapshot",
]
