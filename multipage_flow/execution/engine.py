"""
Engine - Navigation State Machine

The MultiPageForm is the deterministic state machine that owns the page
pointer of one form session. It never stores form data: every decision asks
the host for the current data through get_current_data() and evaluates the
page predicates against it.
-----------------------------------------------

Forward navigation (advance) is gated:
1. The current page's validate() must return nothing.
2. The optional on_before_page_change gate must not return False or an
   error list.
3. The current page's on_exit hook is awaited before the pointer moves.
While a gated advance is suspended the machine is "navigating" and every
other navigation call is rejected with a warning; nothing is queued.

Backward (go_back) and direct (go_to) navigation are synchronous and never
run validation or exit hooks.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from ..config import settings
from ..domain.models import (
    Data,
    ErrorList,
    FlatNode,
    Page,
    SequenceChild,
    StartingPage,
)
from ..schemas.navigation import NavigationSnapshot
from ..state.models import NavigationState
from .flatten import flatten_pages
from .resolver import (
    find_page_index,
    get_next_page_index,
    is_decision_node,
    is_required,
)
from .schemas.state_machine import StateMachineTransition, TransitionMeta

logger = logging.getLogger(__name__)

BeforePageChange = Callable[
    [Data, Page], Union[bool, ErrorList, Awaitable[Union[bool, ErrorList]]]
]
PageChange = Callable[[Data, Page], None]


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _tree_fingerprint(children: List[SequenceChild]) -> Tuple:
    """
    Identity of every node and of every field value it holds, to notice
    in-place mutation: added/removed children, renamed ids, and predicates
    or hooks reassigned on an existing node.
    """
    return tuple(
        (
            id(child),
            child.id,
            tuple(id(value) for value in vars(child).values()),
            _tree_fingerprint(child.pages) if child.kind == "sequence" else (),
        )
        for child in children
    )


class MultiPageForm:
    """
    Navigation session over a tree of pages.

    Args:
        get_current_data: Returns the latest form data; called on every evaluation.
        pages: The page/sequence/decision tree. Supplied once, treated as immutable.
        starting_page: A page id, a StartingPage sentinel, or None for
            settings.DEFAULT_STARTING_PAGE.
        on_before_page_change: Async-capable gate run before advance moves.
            True proceeds, False blocks silently, an error list blocks and is
            forwarded to on_validation_error.
        on_page_change: Called with (data, new_page) whenever the current page changes.
        on_validation_error: Receives error lists from validate() and the gate.
        on_complete: Called when advance is requested on the last reachable page.
    """

    def __init__(
        self,
        get_current_data: Callable[[], Data],
        pages: List[SequenceChild],
        starting_page: Union[str, StartingPage, None] = None,
        on_before_page_change: Optional[BeforePageChange] = None,
        on_page_change: Optional[PageChange] = None,
        on_validation_error: Optional[Callable[[ErrorList], None]] = None,
        on_complete: Optional[Callable[[Data], None]] = None,
    ):
        self.get_current_data = get_current_data
        self.on_before_page_change = on_before_page_change
        self.on_page_change = on_page_change
        self.on_validation_error = on_validation_error
        self.on_complete = on_complete

        self._pages_input = pages
        self._pages, self._originals = self._build(pages)
        self.state = NavigationState(
            current_page_index=self._initial_index(starting_page)
        )
        self.last_transition: Optional[TransitionMeta] = None

    # ==========================================================================
    # Page Tree
    # ==========================================================================

    def _build(
        self, pages: List[SequenceChild]
    ) -> Tuple[List[FlatNode], Dict[str, SequenceChild]]:
        self._fingerprint = _tree_fingerprint(pages)
        return flatten_pages(pages)

    def set_pages(self, pages: List[SequenceChild]):
        """Replace the page tree. Supported, but a misuse outside of tests."""
        if pages is self._pages_input:
            self._sync_pages()
            return
        self._pages_input = pages
        self._rebuild()

    def _sync_pages(self):
        if _tree_fingerprint(self._pages_input) != self._fingerprint:
            self._rebuild()

    def _rebuild(self):
        if settings.ENVIRONMENT != "production":
            logger.warning(
                "MultiPageForm: pages changed after first use, this can lead to "
                "performance issues and unexpected behavior."
            )
        current = self._current_node()
        previous_id = current.id if current else None
        self._pages, self._originals = self._build(self._pages_input)

        # Stay on the same page when it survived the change.
        index = find_page_index(self._pages, previous_id) if current else None
        if index is None:
            index = min(self.state.current_page_index, max(len(self._pages) - 1, 0))
            if self._pages and is_decision_node(self._pages[index]):
                next_index = get_next_page_index(
                    self.get_current_data(), self._pages, index, False
                )
                index = next_index if next_index is not None else 0
        self.state.current_page_index = index
        self.state.history.clear()

        node = self._current_node()
        if self.state.started and node is not None and node.id != previous_id:
            self._arrive()

    # ==========================================================================
    # Initialization
    # ==========================================================================

    def _initial_index(self, starting_page: Union[str, StartingPage, None]) -> int:
        if not self._pages:
            return 0
        data = self.get_current_data()

        if starting_page is None:
            starting_page = (
                StartingPage.FIRST_PAGE
                if settings.DEFAULT_STARTING_PAGE == "first_page"
                else StartingPage.FIRST_INCOMPLETE
            )

        index = 0
        if isinstance(starting_page, str):
            found = find_page_index(self._pages, starting_page)
            if found is not None:
                index = found
            else:
                logger.warning(
                    f"Form page '{starting_page}' not found. "
                    "Resuming from first incomplete page."
                )
                starting_page = StartingPage.FIRST_INCOMPLETE

        if starting_page is StartingPage.FIRST_INCOMPLETE:
            index = self._first_incomplete_index(data)

        if is_decision_node(self._pages[index]):
            next_index = get_next_page_index(data, self._pages, index, False)
            index = next_index if next_index is not None else 0
        return index

    def _first_incomplete_index(self, data: Data) -> int:
        for index, node in enumerate(self._pages):
            if (
                not is_decision_node(node)
                and is_required(node, data)
                and not node.is_complete(data)
            ):
                return index
        return 0

    def start(self):
        """Fire the arrival callbacks for the initial page (the mount event)."""
        if self.state.started:
            logger.warning("MultiPageForm already started.")
            return
        self.state.started = True
        if self._current_node() is not None:
            self._arrive()

    # ==========================================================================
    # Derived Values
    # ==========================================================================

    def _current_node(self) -> Optional[FlatNode]:
        index = self.state.current_page_index
        if 0 <= index < len(self._pages):
            return self._pages[index]
        return None

    def _original(self, index: Optional[int]) -> Optional[SequenceChild]:
        if index is None:
            return None
        return self._originals[self._pages[index].id]

    def _previous_index(self, data: Data) -> Optional[int]:
        if self.state.last_visited_index is not None:
            return self.state.last_visited_index
        for index in range(self.state.current_page_index - 1, -1, -1):
            node = self._pages[index]
            if not is_decision_node(node) and is_required(node, data):
                return index
        return None

    def _next_index(self, data: Data, to_next_incomplete: bool) -> Optional[int]:
        return get_next_page_index(
            data, self._pages, self.state.current_page_index, to_next_incomplete
        )

    @property
    def sequence(self) -> List[FlatNode]:
        """The flattened page list, effective ids and composed predicates."""
        self._sync_pages()
        return list(self._pages)

    @property
    def current_page(self) -> Optional[Page]:
        """The caller-supplied page object the pointer is on."""
        self._sync_pages()
        node = self._current_node()
        return self._originals[node.id] if node else None

    @property
    def current_page_id(self) -> Optional[str]:
        self._sync_pages()
        node = self._current_node()
        return node.id if node else None

    @property
    def previous_step(self) -> Optional[Page]:
        self._sync_pages()
        return self._original(self._previous_index(self.get_current_data()))

    @property
    def next_step(self) -> Optional[Page]:
        self._sync_pages()
        return self._original(self._next_index(self.get_current_data(), False))

    @property
    def next_incomplete_step(self) -> Optional[Page]:
        self._sync_pages()
        return self._original(self._next_index(self.get_current_data(), True))

    @property
    def is_first(self) -> bool:
        self._sync_pages()
        return self._previous_index(self.get_current_data()) is None

    @property
    def is_final(self) -> bool:
        self._sync_pages()
        return self._next_index(self.get_current_data(), False) is None

    @property
    def is_navigating(self) -> bool:
        return self.state.navigating

    def get_page(self, page_id: str) -> Optional[SequenceChild]:
        """Caller-supplied node for an effective id."""
        return self._originals.get(page_id)

    def snapshot(self) -> NavigationSnapshot:
        self._sync_pages()
        data = self.get_current_data()
        node = self._current_node()

        def page_id(index: Optional[int]) -> Optional[str]:
            return self._pages[index].id if index is not None else None

        next_index = self._next_index(data, False)
        previous_index = self._previous_index(data)
        return NavigationSnapshot(
            current_page_id=node.id if node else None,
            previous_step_id=page_id(previous_index),
            next_step_id=page_id(next_index),
            next_incomplete_step_id=page_id(self._next_index(data, True)),
            is_first=previous_index is None,
            is_final=next_index is None,
            total_pages=len(self._pages),
        )

    # ==========================================================================
    # Navigation
    # ==========================================================================

    async def advance(self, to_next_incomplete: bool = False) -> StateMachineTransition:
        """
        Move to the next page after validation and the before-change gate.

        Args:
            to_next_incomplete: Skip over pages that are already complete.

        Returns:
            ADVANCE when the pointer moved, HOLD otherwise.

        Raises:
            NavigationConfigError: The page graph is broken (missing branch
                target or a cycle).
        """
        self._sync_pages()
        if self.state.navigating:
            logger.warning("Navigation already in progress.")
            return StateMachineTransition.HOLD

        page = self._current_node()
        if page is None:
            logger.warning("No current page to advance from.")
            return StateMachineTransition.HOLD

        data = self.get_current_data()
        if page.kind == "page" and page.validate is not None:
            errors = page.validate(data)
            if errors:
                self._report_validation_error(errors)
                return StateMachineTransition.HOLD

        self.state.navigating = True
        try:
            if self.on_before_page_change is not None:
                result = await maybe_await(
                    self.on_before_page_change(data, self._originals[page.id])
                )
                if result is False:
                    return StateMachineTransition.HOLD
                if result is not True and result:
                    self._report_validation_error(result)
                    return StateMachineTransition.HOLD

            # The gate may have touched the form state.
            data = self.get_current_data()
            current_index = self.state.current_page_index
            next_index = get_next_page_index(
                data, self._pages, current_index, to_next_incomplete
            )
            if next_index is None:
                logger.warning("No next page found.")
                if (
                    not to_next_incomplete
                    or get_next_page_index(data, self._pages, current_index, False) is None
                ):
                    self._complete(data)
                return StateMachineTransition.HOLD

            if page.kind == "page" and page.on_exit is not None:
                await maybe_await(page.on_exit(data))

            self.state.history.append(current_index)
            self._move_to(next_index, StateMachineTransition.ADVANCE)
            return StateMachineTransition.ADVANCE
        finally:
            self.state.navigating = False

    async def advance_to_next_incomplete(self) -> StateMachineTransition:
        return await self.advance(to_next_incomplete=True)

    def go_back(self) -> StateMachineTransition:
        """Return to the page navigation came from, or the nearest required page above."""
        self._sync_pages()
        if self.state.navigating:
            logger.warning("Navigation already in progress.")
            return StateMachineTransition.HOLD

        index = self._previous_index(self.get_current_data())
        if index is None:
            logger.warning("No previous page found.")
            return StateMachineTransition.HOLD

        self.state.pop_history_to(index)
        self._move_to(index, StateMachineTransition.BACK)
        return StateMachineTransition.BACK

    def go_to(self, page_id: str) -> StateMachineTransition:
        """Jump to a page by its effective id."""
        self._sync_pages()
        if self.state.navigating:
            logger.warning("Navigation already in progress.")
            return StateMachineTransition.HOLD

        index = find_page_index(self._pages, page_id)
        if index is None:
            logger.warning(f"Page with ID '{page_id}' not found.")
            return StateMachineTransition.HOLD
        if is_decision_node(self._pages[index]):
            logger.warning(f"Page with ID '{page_id}' is a decision node and cannot be shown.")
            return StateMachineTransition.HOLD
        if index == self.state.current_page_index:
            return StateMachineTransition.HOLD

        # Only forward jumps are remembered; go_back never moves forward.
        if index > self.state.current_page_index:
            self.state.history.append(self.state.current_page_index)
        self._move_to(index, StateMachineTransition.JUMP)
        return StateMachineTransition.JUMP

    # ==========================================================================
    # Side Effects
    # ==========================================================================

    def _move_to(self, index: int, transition: StateMachineTransition):
        previous = self._current_node()
        self.state.current_page_index = index
        self.last_transition = TransitionMeta(
            transition_type=transition,
            from_page_id=previous.id if previous else None,
            to_page_id=self._pages[index].id,
        )
        logger.debug(
            f"{transition.name}: {self.last_transition.from_page_id} -> "
            f"{self.last_transition.to_page_id}"
        )
        self._arrive()

    def _arrive(self):
        data = self.get_current_data()
        node = self._current_node()
        if self.on_page_change is not None:
            self.on_page_change(data, self._originals[node.id])
        if node.kind == "page" and node.on_arrive is not None:
            node.on_arrive(data)

    def _report_validation_error(self, errors: ErrorList):
        if self.on_validation_error is not None:
            self.on_validation_error(errors)
        else:
            logger.debug(f"Validation blocked navigation: {errors}")

    def _complete(self, data: Data):
        if self.on_complete is not None:
            self.on_complete(data)
