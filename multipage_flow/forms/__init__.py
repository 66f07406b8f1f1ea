"""
Forms Layer - Host Form-State Integration

Defines the FormStateAdapter contract, a pydantic-backed implementation and
the wiring that binds an adapter to a MultiPageForm.
"""

from multipage_flow.forms.adapters.pydantic_adapter import PydanticFormAdapter
from multipage_flow.forms.interface import FormStateAdapter
from multipage_flow.forms.navigator import create_form_navigator

__all__ = [
    "FormStateAdapter",
    "PydanticFormAdapter",
    "create_form_navigator",
]
