"""
Tests for SessionController and SessionRegistry.

A scripted fake client stands in for Gemini; no network is involved.
"""
import pytest

from this_or_that.categories import Category
from this_or_that.exceptions import NetworkError, SchemaError
from this_or_that.gemini_client import GenerationResult
from this_or_that.models import HistoryEntry, OptionPair
from this_or_that.session import Session, SessionController, SessionRegistry, SessionStatus


PIZZA = OptionPair("Pineapple on pizza", "No pineapple on pizza")


class FakeClient:
    """Returns queued results (or a default pair) and records every call."""

    def __init__(self, *results, on_generate=None):
        self.results = list(results)
        self.calls = []
        self.loading_seen = []
        self.on_generate = on_generate
        self.controller = None

    def generate(self, category):
        self.calls.append(category)
        if self.controller is not None:
            self.loading_seen.append(self.controller.session.is_loading)
        if self.on_generate:
            self.on_generate(self, category)
        if self.results:
            return self.results.pop(0)
        n = len(self.calls)
        return ok(f"{category.value} this {n}", f"{category.value} that {n}")


def ok(first, second):
    return GenerationResult(pair=OptionPair(first, second))


def failed(error):
    return GenerationResult(error=error)


def _controller(client, session=None):
    controller = SessionController(client, session)
    client.controller = controller
    return controller


def _loaded_controller(client, categories):
    """Controller with one successful round per category, cursor at the end."""
    controller = _controller(client)
    for i, category in enumerate(categories):
        if i == 0:
            controller.select_category(category)
            controller.ensure_loaded()
        else:
            controller.select_category(category)
    return controller


class TestInitialLoad:
    """First generation of a session."""

    def test_food_and_drink_scenario(self):
        client = FakeClient(ok("Pineapple on pizza", "No pineapple on pizza"))
        controller = _controller(client, Session(selected_category=Category.FOOD_AND_DRINK))

        session = controller.ensure_loaded()

        assert session.current_pair == PIZZA
        assert session.history == (HistoryEntry(Category.FOOD_AND_DRINK, PIZZA),)
        assert session.cursor == 0
        assert session.status is SessionStatus.IDLE
        assert client.calls == [Category.FOOD_AND_DRINK]

    def test_ensure_loaded_does_not_regenerate(self):
        client = FakeClient()
        controller = _controller(client)

        controller.ensure_loaded()
        controller.ensure_loaded()

        assert len(client.calls) == 1

    def test_select_category_before_first_round_is_initial_load(self):
        client = FakeClient()
        controller = _controller(client)

        session = controller.select_category(Category.FANTASY)

        assert len(session.history) == 1
        assert session.cursor == 0
        assert session.history[0].category == Category.FANTASY


class TestRequestNext:
    """Explicit "next" requests."""

    @pytest.mark.parametrize("category", list(Category))
    def test_success_appends_entry(self, category):
        client = FakeClient()
        controller = _controller(client, Session(selected_category=category))
        controller.ensure_loaded()

        session = controller.request_next()

        assert client.loading_seen == [True, True]
        assert session.status is SessionStatus.IDLE
        assert session.current_pair.first and session.current_pair.second
        assert len(session.history) == 2
        assert session.history[-1] == HistoryEntry(category, session.current_pair)
        assert session.cursor == 1

    @pytest.mark.parametrize("category", list(Category))
    def test_failure_leaves_history(self, category):
        client = FakeClient(ok("a", "b"), failed(NetworkError("offline")))
        controller = _controller(client, Session(selected_category=category))
        before = controller.ensure_loaded()

        session = controller.request_next()

        assert session.status is SessionStatus.ERRORED
        assert not session.is_loading
        assert session.history == before.history
        assert session.cursor == before.cursor

    def test_next_after_previous_discards_later_rounds(self):
        client = FakeClient()
        controller = _loaded_controller(client, [Category.TRAVEL])
        controller.request_next()
        controller.request_next()
        controller.request_previous()
        controller.request_previous()

        session = controller.request_next()

        assert len(session.history) == 2
        assert session.cursor == 1

    def test_next_before_any_round_is_not_initial_reset(self):
        client = FakeClient(failed(NetworkError("offline")))
        controller = _controller(client)
        controller.ensure_loaded()

        session = controller.request_next()

        assert session.cursor == 0
        assert len(session.history) == 1


class TestFailures:
    """Errors end in ERRORED with history untouched."""

    def test_schema_error_scenario(self):
        client = FakeClient(failed(SchemaError("Expected an array of two strings, got 3 items.")))
        controller = _controller(client)

        session = controller.ensure_loaded()

        assert session.status is SessionStatus.ERRORED
        assert session.current_pair == OptionPair("", "")
        assert "got 3 items" in session.last_error
        assert session.history == ()
        assert session.cursor == -1

    def test_two_failures_are_idempotent(self):
        client = FakeClient(ok("a", "b"), failed(NetworkError("x")), failed(NetworkError("y")))
        controller = _controller(client)
        before = controller.ensure_loaded()

        controller.request_next()
        session = controller.request_next()

        assert session.history == before.history
        assert session.cursor == before.cursor
        assert session.last_error.startswith("Failed to fetch options: y.")

    def test_failure_is_not_retried_automatically(self):
        client = FakeClient(failed(NetworkError("offline")))
        controller = _controller(client)

        controller.ensure_loaded()

        assert len(client.calls) == 1

    def test_empty_pair_is_failure(self):
        client = FakeClient(GenerationResult(pair=OptionPair.empty()))
        controller = _controller(client)

        session = controller.ensure_loaded()

        assert session.status is SessionStatus.ERRORED
        assert session.history == ()

    def test_unexpected_client_exception_leaves_loading(self):
        def explode(client, category):
            raise RuntimeError("bug")

        client = FakeClient(on_generate=explode)
        controller = _controller(client)

        with pytest.raises(RuntimeError):
            controller.ensure_loaded()

        assert controller.session.status is SessionStatus.ERRORED


class TestRequestPrevious:
    """Stepping back never calls the client."""

    def test_noop_at_first_round(self):
        client = FakeClient()
        controller = _loaded_controller(client, [Category.TRAVEL])
        before = controller.session

        assert controller.request_previous() is before
        assert len(client.calls) == 1

    def test_steps_back_exactly_one(self):
        client = FakeClient()
        controller = _loaded_controller(client, [Category.TRAVEL, Category.ANIMALS, Category.FANTASY])
        calls = len(client.calls)

        session = controller.request_previous()

        assert session.cursor == 1
        assert session.current_pair == session.history[1].pair
        assert session.selected_category == Category.ANIMALS
        assert len(client.calls) == calls


class TestSelectCategory:
    """Category changes regenerate exactly when the round no longer matches."""

    def test_same_category_does_not_generate(self):
        client = FakeClient()
        controller = _loaded_controller(client, [Category.TRAVEL])

        controller.select_category(Category.TRAVEL)

        assert len(client.calls) == 1

    def test_branch_from_middle_truncates(self):
        client = FakeClient()
        controller = _loaded_controller(client, [Category.TRAVEL, Category.ANIMALS, Category.FANTASY])
        controller.request_previous()
        controller.request_previous()
        kept = controller.session.history[:1]

        session = controller.select_category(Category.SUPERPOWERS)

        assert len(session.history) == 2
        assert session.history[:1] == kept
        assert session.history[1].category == Category.SUPERPOWERS
        assert session.cursor == 1

    def test_cursor_two_scenario(self):
        client = FakeClient()
        controller = _loaded_controller(client, [Category.TRAVEL, Category.ANIMALS, Category.FANTASY])
        assert controller.session.cursor == 2

        session = controller.select_category(Category.TECHNOLOGY)

        assert len(session.history) == 4
        assert session.cursor == 3
        assert session.history[3].category == Category.TECHNOLOGY

    def test_failed_selection_keeps_history(self):
        client = FakeClient(ok("a", "b"), failed(NetworkError("offline")))
        controller = _controller(client)
        before = controller.ensure_loaded()

        session = controller.select_category(Category.ANIMALS)

        assert session.status is SessionStatus.ERRORED
        assert session.selected_category == Category.ANIMALS
        assert session.history == before.history


class TestSingleFlight:
    """Only one generation is in flight per controller."""

    def test_next_while_loading_is_not_issued(self):
        def press_next(client, category):
            if len(client.calls) == 1:
                client.controller.request_next()

        client = FakeClient(on_generate=press_next)
        controller = _controller(client)

        controller.ensure_loaded()

        assert len(client.calls) == 1
        assert controller.session.cursor == 0

    def test_category_change_while_loading_regenerates_once(self):
        def change_category(client, category):
            if len(client.calls) == 1:
                client.controller.select_category(Category.ANIMALS)

        client = FakeClient(on_generate=change_category)
        controller = _controller(client, Session(selected_category=Category.TRAVEL))

        session = controller.ensure_loaded()

        assert client.calls == [Category.TRAVEL, Category.ANIMALS]
        assert [entry.category for entry in session.history] == [Category.TRAVEL, Category.ANIMALS]
        assert session.cursor == 1
        assert session.selected_category == Category.ANIMALS

    def test_category_change_while_failing_waits_for_user(self):
        def change_category(client, category):
            if len(client.calls) == 1:
                client.controller.select_category(Category.ANIMALS)

        client = FakeClient(failed(NetworkError("offline")), on_generate=change_category)
        controller = _controller(client)

        session = controller.ensure_loaded()

        assert len(client.calls) == 1
        assert session.status is SessionStatus.ERRORED


class TestReset:
    def test_reset_clears_history(self):
        client = FakeClient()
        controller = _loaded_controller(client, [Category.TRAVEL, Category.ANIMALS])

        session = controller.reset(Category.FANTASY)

        assert session == Session(selected_category=Category.FANTASY)


class TestSessionRegistry:
    """Tests for per-browser controllers."""

    def test_same_id_same_controller(self):
        registry = SessionRegistry(FakeClient)
        assert registry.get_controller("a") is registry.get_controller("a")

    def test_sessions_are_isolated(self):
        registry = SessionRegistry(FakeClient, default_category=Category.ANIMALS)

        registry.get_controller("a").ensure_loaded()

        assert registry.get_controller("a").session.cursor == 0
        assert registry.get_controller("b").session.cursor == -1
        assert registry.get_controller("b").session.selected_category == Category.ANIMALS

    def test_oldest_idle_session_is_evicted(self):
        registry = SessionRegistry(FakeClient, max_sessions=2)
        registry.get_controller("a")
        registry.get_controller("b")

        registry.get_controller("c")

        assert not registry.has_session("a")
        assert registry.has_session("b")
        assert registry.has_session("c")
        assert len(registry) == 2

    def test_access_keeps_session_alive(self):
        registry = SessionRegistry(FakeClient, max_sessions=2)
        kept = registry.get_controller("a")
        registry.get_controller("b")
        registry.get_controller("a")

        registry.get_controller("c")

        assert registry.get_controller("a") is kept
        assert not registry.has_session("b")

    def test_max_sessions_must_be_positive(self):
        with pytest.raises(ValueError):
            SessionRegistry(FakeClient, max_sessions=0)
