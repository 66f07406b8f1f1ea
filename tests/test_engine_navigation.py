import asyncio
import logging

import pytest

from multipage_flow.config import settings
from multipage_flow.domain.models import Sequence, StartingPage
from multipage_flow.execution.engine import MultiPageForm
from multipage_flow.execution.exceptions import NavigationLoopError, PageNotFoundError
from multipage_flow.execution.schemas import StateMachineTransition

from .helpers import decision, ids, page

ENGINE_LOGGER = "multipage_flow.execution.engine"


def complete(data):
    return True


def make_form(pages, data=None, **kwargs):
    data = {} if data is None else data
    return MultiPageForm(get_current_data=lambda: data, pages=pages, **kwargs)


# --- Forward navigation ---


def test_advance_moves_to_the_next_page():
    form = make_form([page("p1"), page("p2")])

    assert asyncio.run(form.advance()) is StateMachineTransition.ADVANCE

    assert form.current_page_id == "p2"
    assert form.next_incomplete_step is None
    assert form.last_transition.from_page_id == "p1"
    assert form.last_transition.to_page_id == "p2"


def test_advance_honors_alternate_next_page():
    form = make_form(
        [page("p1", alternate_next_page=lambda data: "p3"), page("p2"), page("p3")]
    )

    asyncio.run(form.advance())

    assert form.current_page_id == "p3"


def test_advance_routes_through_decision_nodes():
    form = make_form(
        [
            page("p1"),
            decision("route", select_next_page=lambda data: "p3"),
            page("p2"),
            page("p3"),
        ]
    )

    asyncio.run(form.advance())

    assert form.current_page_id == "p3"


def test_advance_skips_pages_that_are_not_required():
    form = make_form(
        [page("p1"), page("p2", is_required=lambda data: False), page("p3")]
    )

    asyncio.run(form.advance())

    assert form.current_page_id == "p3"


def test_advance_to_next_incomplete_skips_complete_pages():
    form = make_form([page("p1"), page("p2", is_complete=complete), page("p3")])

    assert asyncio.run(form.advance_to_next_incomplete()) is StateMachineTransition.ADVANCE

    assert form.current_page_id == "p3"


def test_advance_on_final_page_holds_and_completes(caplog):
    completed = []
    data = {"done": True}
    form = make_form(
        [page("p1"), page("p2", is_final=lambda data: True), page("p3")],
        data=data,
        starting_page="p2",
        on_complete=completed.append,
    )

    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        result = asyncio.run(form.advance())

    assert result is StateMachineTransition.HOLD
    assert form.current_page_id == "p2"
    assert completed == [data]
    assert "No next page found." in caplog.text
    assert form.next_step is None
    assert form.next_incomplete_step is None
    assert form.is_final


def test_skip_mode_without_incomplete_page_does_not_complete():
    completed = []
    form = make_form(
        [page("p1"), page("p2", is_complete=complete)],
        on_complete=completed.append,
    )

    result = asyncio.run(form.advance_to_next_incomplete())

    assert result is StateMachineTransition.HOLD
    assert completed == []


def test_missing_branch_target_propagates_and_clears_in_flight_flag():
    form = make_form([page("p1", alternate_next_page=lambda data: "missing"), page("p2")])

    with pytest.raises(PageNotFoundError):
        asyncio.run(form.advance())

    assert not form.is_navigating
    assert form.current_page_id == "p1"


def test_cycle_propagates_from_advance():
    form = make_form(
        [
            page("p1", alternate_next_page=lambda data: "p2"),
            page("p2", alternate_next_page=lambda data: "p1", is_complete=complete),
        ]
    )

    with pytest.raises(NavigationLoopError):
        asyncio.run(form.advance_to_next_incomplete())


def test_advance_while_in_flight_is_rejected(caplog):
    async def scenario():
        release = asyncio.Event()

        async def gate(data, current):
            await release.wait()
            return True

        form = make_form([page("p1"), page("p2"), page("p3")], on_before_page_change=gate)
        pending = asyncio.create_task(form.advance())
        await asyncio.sleep(0)

        assert form.is_navigating
        assert await form.advance() is StateMachineTransition.HOLD
        assert form.go_back() is StateMachineTransition.HOLD
        assert form.go_to("p3") is StateMachineTransition.HOLD

        release.set()
        assert await pending is StateMachineTransition.ADVANCE
        return form

    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        form = asyncio.run(scenario())

    assert form.current_page_id == "p2"
    assert not form.is_navigating
    assert caplog.text.count("Navigation already in progress.") == 3


# --- Backward and direct navigation ---


def test_go_back_returns_along_history():
    form = make_form([page("p1"), page("p2"), page("p3"), page("p4")])
    asyncio.run(form.advance())
    form.go_to("p4")

    assert form.go_back() is StateMachineTransition.BACK
    assert form.current_page_id == "p2"
    assert form.go_back() is StateMachineTransition.BACK
    assert form.current_page_id == "p1"


def test_go_back_without_history_uses_nearest_required_page():
    form = make_form(
        [page("p1"), page("p2", is_required=lambda data: False), page("p3")],
        starting_page="p3",
    )

    form.go_back()

    assert form.current_page_id == "p1"


def test_go_back_on_first_page_holds(caplog):
    form = make_form([page("p1"), page("p2")])

    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        assert form.go_back() is StateMachineTransition.HOLD

    assert form.is_first
    assert "No previous page found." in caplog.text


def test_backward_jump_is_not_undone_by_go_back(caplog):
    form = make_form([page("p1"), page("p2"), page("p3")], starting_page="p3")

    form.go_to("p1")

    assert form.state.history == []
    assert form.is_first
    assert form.previous_step is None
    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        assert form.go_back() is StateMachineTransition.HOLD
    assert form.current_page_id == "p1"


def test_go_back_ignores_history_above_the_current_page():
    form = make_form([page("p1"), page("p2"), page("p3"), page("p4")])
    form.go_to("p4")
    form.go_to("p2")

    assert form.previous_step.id == "p1"
    assert form.go_back() is StateMachineTransition.BACK
    assert form.current_page_id == "p1"
    assert form.state.history == []


def test_go_to_jumps_by_effective_id():
    form = make_form([page("intro"), Sequence(id="details", pages=[page("a"), page("b")])])

    assert form.go_to("details.b") is StateMachineTransition.JUMP

    assert form.current_page_id == "details.b"
    assert form.state.history == [0]


def test_go_to_unknown_page_warns(caplog):
    form = make_form([page("p1"), page("p2")])

    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        assert form.go_to("nowhere") is StateMachineTransition.HOLD

    assert "Page with ID 'nowhere' not found." in caplog.text
    assert form.current_page_id == "p1"


def test_go_to_decision_node_is_refused():
    form = make_form([page("p1"), decision("route"), page("p2")])

    assert form.go_to("route") is StateMachineTransition.HOLD
    assert form.current_page_id == "p1"


def test_go_to_current_page_holds():
    form = make_form([page("p1"), page("p2")])

    assert form.go_to("p1") is StateMachineTransition.HOLD
    assert form.state.history == []


# --- Derived values ---


def test_derived_values_follow_current_data():
    data = {"skip": False}
    form = make_form(
        [page("p1"), page("p2", is_required=lambda data: not data["skip"]), page("p3")],
        data=data,
    )

    assert form.next_step.id == "p2"
    data["skip"] = True
    assert form.next_step.id == "p3"


def test_snapshot_describes_position():
    form = make_form([page("p1"), page("p2", is_complete=complete), page("p3")])

    snapshot = form.snapshot()

    assert snapshot.current_page_id == "p1"
    assert snapshot.previous_step_id is None
    assert snapshot.next_step_id == "p2"
    assert snapshot.next_incomplete_step_id == "p3"
    assert snapshot.is_first
    assert not snapshot.is_final
    assert snapshot.total_pages == 3


def test_is_final_on_last_page():
    form = make_form([page("p1"), page("p2")], starting_page="p2")

    assert form.is_final
    assert not form.is_first


# --- Initialization ---


def test_starts_on_first_incomplete_required_page():
    form = make_form(
        [
            page("p1", is_complete=complete),
            page("p2", is_required=lambda data: False),
            page("p3"),
        ]
    )

    assert form.current_page_id == "p3"


def test_starts_on_first_page_when_everything_is_complete():
    form = make_form([page("p1", is_complete=complete), page("p2", is_complete=complete)])

    assert form.current_page_id == "p1"


def test_first_page_mode_ignores_completeness():
    form = make_form(
        [page("p1", is_complete=complete), page("p2")],
        starting_page=StartingPage.FIRST_PAGE,
    )

    assert form.current_page_id == "p1"


def test_default_starting_page_comes_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_STARTING_PAGE", "first_page")

    form = make_form([page("p1", is_complete=complete), page("p2")])

    assert form.current_page_id == "p1"


def test_explicit_starting_page():
    form = make_form([page("p1"), page("p2"), page("p3")], starting_page="p2")

    assert form.current_page_id == "p2"


def test_unknown_starting_page_falls_back_to_first_incomplete(caplog):
    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        form = make_form(
            [page("p1", is_complete=complete), page("p2")], starting_page="nope"
        )

    assert form.current_page_id == "p2"
    assert "Form page 'nope' not found. Resuming from first incomplete page." in caplog.text


def test_leading_decision_node_resolves_forward():
    form = make_form(
        [decision("route", select_next_page=lambda data: "p2"), page("p1"), page("p2")],
        starting_page=StartingPage.FIRST_PAGE,
    )

    assert form.current_page_id == "p2"


def test_leading_decision_node_without_selection_falls_through():
    form = make_form(
        [decision("route"), page("p1"), page("p2")],
        starting_page=StartingPage.FIRST_PAGE,
    )

    assert form.current_page_id == "p1"


def test_empty_tree(caplog):
    form = make_form([])

    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        assert asyncio.run(form.advance()) is StateMachineTransition.HOLD
        assert form.go_back() is StateMachineTransition.HOLD

    assert form.current_page is None
    assert form.current_page_id is None
    assert form.is_final
    assert form.sequence == []


# --- Page tree changes ---


def test_tree_mutation_is_picked_up_with_a_warning(caplog):
    pages = [page("a"), page("b")]
    form = make_form(pages)
    form.go_to("b")

    pages.insert(0, page("z"))
    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        assert ids(form.sequence) == ["z", "a", "b"]

    assert "pages changed after first use" in caplog.text
    assert form.current_page_id == "b"
    assert form.state.history == []


def test_tree_mutation_warning_is_silent_in_production(caplog, monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    pages = [page("a")]
    form = make_form(pages)

    pages.append(page("b"))
    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        assert ids(form.sequence) == ["a", "b"]

    assert "pages changed" not in caplog.text


def test_set_pages_replaces_the_tree():
    changes = []
    form = make_form(
        [page("a"), page("b")],
        on_page_change=lambda data, new_page: changes.append(new_page.id),
    )
    form.start()

    form.set_pages([page("x")])

    assert ids(form.sequence) == ["x"]
    assert form.current_page_id == "x"
    assert changes == ["a", "x"]


def test_tree_change_does_not_land_on_a_decision_node():
    changes = []
    form = make_form(
        [page("a"), page("b")],
        starting_page="b",
        on_page_change=lambda data, new_page: changes.append(new_page.id),
    )
    form.start()

    form.set_pages(
        [page("x"), decision("route", select_next_page=lambda data: "z"), page("y"), page("z")]
    )

    assert form.current_page_id == "z"
    assert changes == ["b", "z"]


def test_surviving_current_page_fires_no_change():
    changes = []
    pages = [page("a"), page("b")]
    form = make_form(
        pages, on_page_change=lambda data, new_page: changes.append(new_page.id)
    )
    form.start()

    pages.append(page("c"))
    form.sequence

    assert changes == ["a"]


def test_reassigned_predicate_is_picked_up(caplog):
    second = page("p2")
    form = make_form([page("p1"), second, page("p3")])
    assert form.next_step.id == "p2"

    second.is_required = lambda data: False
    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        assert form.next_step.id == "p3"

    assert "pages changed after first use" in caplog.text


def test_unchanged_tree_is_not_rebuilt(caplog):
    pages = [page("a"), page("b")]
    form = make_form(pages)

    with caplog.at_level(logging.WARNING, logger=ENGINE_LOGGER):
        form.set_pages(pages)
        form.sequence

    assert caplog.text == ""
