"""Tests for the base store."""

from typing import Any

import pytest

from sample_chain import counter
from storechain import (
    ActionTypes,
    InvalidActionError,
    InvalidEnhancerError,
    InvalidReducerError,
    ReducerDispatchError,
    create_store,
    get_action_type,
)


class TestCreateStore:
    """Test store creation."""

    def test_init_action_seeds_state(self) -> None:
        """Test the reducer's initial state is used when none is preloaded."""
        store = create_store(counter)

        assert store.get_state() == 0

    def test_preloaded_state(self) -> None:
        """Test the preloaded state is passed to the reducer on init."""
        store = create_store(counter, 10)

        assert store.get_state() == 10

    def test_reducer_receives_init_action(self) -> None:
        """Test the first action seen by the reducer is the private INIT type."""
        actions: list[Any] = []

        def reducer(state: Any, action: Any) -> Any:
            actions.append(action)
            return state

        create_store(reducer)

        assert actions == [{"type": ActionTypes.INIT}]
        assert ActionTypes.INIT.startswith("@@storechain/INIT.")

    def test_non_callable_reducer(self) -> None:
        """Test a non-callable reducer is rejected."""
        with pytest.raises(InvalidReducerError, match="reducer"):
            create_store("not a reducer")  # type: ignore[arg-type]

    def test_reducer_error_distinct_from_enhancer_error(self) -> None:
        """Test a bad reducer is not reported as an enhancer problem."""
        with pytest.raises(InvalidReducerError) as exc_info:
            create_store(None)  # type: ignore[arg-type]

        assert not isinstance(exc_info.value, InvalidEnhancerError)
        assert isinstance(exc_info.value, TypeError)

    def test_non_callable_enhancer(self) -> None:
        """Test a non-callable enhancer is rejected."""
        with pytest.raises(InvalidEnhancerError, match="enhancer"):
            create_store(counter, 0, "not an enhancer")  # type: ignore[arg-type]

    def test_enhancer_receives_create_store(self) -> None:
        """Test the enhancer wraps create_store and receives reducer and state."""
        received: list[Any] = []

        def enhancer(create):
            def create_enhanced(reducer, preloaded_state):
                received.append((create, reducer, preloaded_state))
                return create(reducer, preloaded_state)

            return create_enhanced

        store = create_store(counter, 3, enhancer)

        assert received == [(create_store, counter, 3)]
        assert store.get_state() == 3


class TestDispatch:
    """Test dispatching actions to the base store."""

    def test_dispatch_returns_action(self) -> None:
        """Test dispatch returns the dispatched action."""
        store = create_store(counter)
        action = {"type": "add", "amount": 2}

        assert store.dispatch(action) is action
        assert store.get_state() == 2

    def test_extra_arguments_ignored(self) -> None:
        """Test extra positional arguments are accepted by the base dispatch."""
        store = create_store(counter)

        store.dispatch({"type": "add", "amount": 1}, "extra")

        assert store.get_state() == 1

    @pytest.mark.parametrize("action", [None, 42, "add", {"amount": 1}, {"type": None}])
    def test_invalid_actions_rejected(self, action: Any) -> None:
        """Test actions without a type raise InvalidActionError."""
        store = create_store(counter)

        with pytest.raises(InvalidActionError):
            store.dispatch(action)
        assert store.get_state() == 0

    def test_invalid_action_is_type_error(self) -> None:
        """Test InvalidActionError can be caught as TypeError."""
        with pytest.raises(TypeError):
            get_action_type(object())

    def test_get_action_type_object(self) -> None:
        """Test objects with a type attribute are valid actions."""

        class Ping:
            type = "ping"

        assert get_action_type(Ping()) == "ping"
        assert get_action_type({"type": "pong"}) == "pong"

    def test_reducer_may_not_dispatch(self) -> None:
        """Test dispatching from inside the reducer fails."""
        holder: dict[str, Any] = {}

        def reducer(state: Any, action: Any) -> Any:
            if action["type"] == "nested":
                holder["store"].dispatch({"type": "inner"})
            return state

        store = create_store(reducer, 0)
        holder["store"] = store

        with pytest.raises(ReducerDispatchError, match="Reducers may not dispatch"):
            store.dispatch({"type": "nested"})

        # The store recovers after the failed dispatch
        store.dispatch({"type": "other"})

    def test_reducer_may_not_read_state(self) -> None:
        """Test get_state from inside the reducer fails."""
        holder: dict[str, Any] = {}

        def reducer(state: Any, action: Any) -> Any:
            if action["type"] == "peek":
                holder["store"].get_state()
            return state

        store = create_store(reducer, 0)
        holder["store"] = store

        with pytest.raises(ReducerDispatchError):
            store.dispatch({"type": "peek"})


class TestSubscribe:
    """Test change listeners."""

    def test_listener_called_after_each_dispatch(self) -> None:
        """Test listeners run after the state is updated."""
        store = create_store(counter)
        states: list[int] = []
        store.subscribe(lambda: states.append(store.get_state()))

        store.dispatch({"type": "add", "amount": 1})
        store.dispatch({"type": "noop"})

        assert states == [1, 1]

    def test_unsubscribe(self) -> None:
        """Test unsubscribed listeners are not called and unsubscribe is idempotent."""
        store = create_store(counter)
        calls: list[str] = []
        unsubscribe = store.subscribe(lambda: calls.append("called"))

        store.dispatch({"type": "noop"})
        unsubscribe()
        unsubscribe()
        store.dispatch({"type": "noop"})

        assert calls == ["called"]

    def test_listeners_snapshot_during_notification(self) -> None:
        """Test listeners added during notification run from the next dispatch."""
        store = create_store(counter)
        calls: list[str] = []

        def late() -> None:
            calls.append("late")

        def first() -> None:
            calls.append("first")
            store.subscribe(late)

        store.subscribe(first)

        store.dispatch({"type": "noop"})
        assert calls == ["first"]

        calls.clear()
        store.dispatch({"type": "noop"})
        assert calls == ["first", "late"]

    def test_non_callable_listener(self) -> None:
        """Test subscribing a non-callable raises TypeError."""
        store = create_store(counter)

        with pytest.raises(TypeError):
            store.subscribe("nope")  # type: ignore[arg-type]


class TestReplaceReducer:
    """Test swapping the reducer."""

    def test_replace_reducer(self) -> None:
        """Test subsequent dispatches use the new reducer."""
        store = create_store(counter, 5)

        def doubling(state: Any, action: Any) -> Any:
            if action["type"] == "add":
                return state + 2 * action["amount"]
            return state

        store.replace_reducer(doubling)
        store.dispatch({"type": "add", "amount": 3})

        assert store.get_state() == 11

    def test_replace_dispatches_replace_action(self) -> None:
        """Test the new reducer receives the private REPLACE action."""
        actions: list[Any] = []
        store = create_store(counter, 0)

        def recorder(state: Any, action: Any) -> Any:
            actions.append(action["type"])
            return state

        store.replace_reducer(recorder)

        assert actions == [ActionTypes.REPLACE]

    def test_replace_with_non_callable(self) -> None:
        """Test replacing with a non-callable is rejected."""
        store = create_store(counter)

        with pytest.raises(InvalidReducerError):
            store.replace_reducer(None)  # type: ignore[arg-type]
