"""
Form Navigator - Host Adapter Wiring

Binds a MultiPageForm to a FormStateAdapter: the adapter supplies the
current data, and every advance validates the fields the current page has
mounted before the engine is allowed to move.
"""

import logging
from typing import Any, List, Optional

from ..domain.models import SequenceChild
from ..execution.engine import BeforePageChange, MultiPageForm, maybe_await
from .interface import FormStateAdapter

logger = logging.getLogger(__name__)


def create_form_navigator(
    adapter: FormStateAdapter,
    pages: List[SequenceChild],
    on_before_page_change: Optional[BeforePageChange] = None,
    **kwargs: Any,
) -> MultiPageForm:
    """
    Build a MultiPageForm driven by a host form-state adapter.

    The gate runs the caller's own on_before_page_change first (False or an
    error list blocks), then triggers field validation on the mounted
    fields. On success transient validation state is reset with values kept;
    on failure the form is marked submitted so the host shows the errors.

    Args:
        adapter: The host form-state adapter.
        pages: The page/sequence/decision tree.
        on_before_page_change: Optional caller gate, run before field validation.
        **kwargs: Remaining MultiPageForm arguments (starting_page, callbacks).
    """

    async def gate(data, page):
        if on_before_page_change is not None:
            result = await maybe_await(on_before_page_change(data, page))
            if result is False or (result is not True and result):
                return result

        fields = adapter.mounted_fields()
        valid = await adapter.trigger(fields)
        if valid:
            adapter.reset(keep_values=True)
        else:
            logger.debug(f"Field validation failed on page '{page.id}' for {fields}")
            adapter.mark_submitted()
        return valid

    return MultiPageForm(
        get_current_data=adapter.get_values,
        pages=pages,
        on_before_page_change=gate,
        **kwargs,
    )
