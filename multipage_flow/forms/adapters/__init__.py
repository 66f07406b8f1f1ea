from multipage_flow.forms.adapters.pydantic_adapter import PydanticFormAdapter

__all__ = [
    "PydanticFormAdapter",
]
