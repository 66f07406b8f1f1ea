from abc import ABC, abstractmethod
from typing import Any, Dict, List


class FormStateAdapter(ABC):
    """
    Abstract Base Class interface that defines the contract for any host
    form-state library (a pydantic model, a web form binding, etc.).
    The navigation engine only needs to ask "what is the data right now",
    to validate the fields currently on screen, and to clear transient
    validation state between steps.
    """

    @abstractmethod
    def get_values(self) -> Dict[str, Any]:
        """
        Returns the current (possibly partial) form data.
        """
        pass

    @abstractmethod
    def mounted_fields(self) -> List[str]:
        """
        Returns the names of the fields rendered by the current page.
        """
        pass

    @abstractmethod
    async def trigger(self, fields: List[str]) -> bool:
        """
        Validates the given fields. Returns True when all of them are valid.
        """
        pass

    @abstractmethod
    def reset(self, keep_values: bool = True):
        """
        Clears errors and submission state, optionally keeping the values.
        """
        pass

    @abstractmethod
    def mark_submitted(self):
        """
        Flags the form as submitted so the host shows field errors.
        """
        pass
