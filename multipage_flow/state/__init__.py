"""
State Layer - Runtime Data Models

Defines the runtime pointer state that tracks a user's position in a
multi-page form.
"""

from multipage_flow.state.models import NavigationState

__all__ = [
    "NavigationState",
]
