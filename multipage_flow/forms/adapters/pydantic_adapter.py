from typing import Any, Dict, Iterable, List, Optional, Type

from pydantic import BaseModel, ValidationError

from ..interface import FormStateAdapter


def _field_path(loc: Iterable[Any]) -> str:
    return ".".join(str(part) for part in loc)


def _belongs_to(path: str, field: str) -> bool:
    return path == field or path.startswith(f"{field}.")


class PydanticFormAdapter(FormStateAdapter):
    """
    Form state held in a plain dict and validated against a pydantic model.

    Values are kept partial while the user moves through the pages; only the
    fields mounted by the current page are validated on trigger(), so errors
    for pages not reached yet never block navigation.
    """

    def __init__(self, model: Type[BaseModel], values: Optional[Dict[str, Any]] = None):
        self.model = model
        self.values: Dict[str, Any] = dict(values or {})
        self.errors: Dict[str, str] = {}
        self.submitted = False
        self._mounted: List[str] = []

    def get_values(self) -> Dict[str, Any]:
        return dict(self.values)

    def set_value(self, name: str, value: Any):
        self.values[name] = value

    def mount(self, *fields: str):
        """Replace the set of fields rendered by the current page."""
        self._mounted = list(fields)

    def mounted_fields(self) -> List[str]:
        return list(self._mounted)

    async def trigger(self, fields: List[str]) -> bool:
        self.errors = {
            path: message
            for path, message in self._validate().items()
            if any(_belongs_to(path, field) for field in fields)
        }
        return not self.errors

    def reset(self, keep_values: bool = True):
        self.errors = {}
        self.submitted = False
        if not keep_values:
            self.values = {}

    def mark_submitted(self):
        self.submitted = True

    def _validate(self) -> Dict[str, str]:
        try:
            self.model.model_validate(self.values)
        except ValidationError as exc:
            return {_field_path(err["loc"]): err["msg"] for err in exc.errors()}
        return {}
