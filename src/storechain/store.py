"""Base state container.

A store owns the current state and exposes a single write path,
``dispatch(action)``, that feeds the action through the reducer:

    Reducer r: (State, Action) → State

    dispatch(a) ⇒ state := r(state, a); notify listeners; return a

Enhancers (see ``storechain.middleware.apply_middleware``) wrap
``create_store`` and return stores whose ``dispatch`` is replaced.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from storechain.errors import InvalidActionError, InvalidEnhancerError, InvalidReducerError, ReducerDispatchError

logger = logging.getLogger(__name__)


# Type aliases
Reducer = Callable[[Any, Any], Any]
Listener = Callable[[], None]
Unsubscribe = Callable[[], None]


def _random_suffix() -> str:
    return ".".join(secrets.token_hex(3))


class ActionTypes:
    """Private action types reserved by the store.

    Reducers must not handle these directly. For any unknown action a reducer
    should return its current state, or its initial state when the current
    state is None.
    """

    INIT = f"@@storechain/INIT.{_random_suffix()}"
    REPLACE = f"@@storechain/REPLACE.{_random_suffix()}"


def get_action_type(action: Any) -> Any:
    """Return the discriminant of an action.

    Args:
        action: A mapping with a "type" key or an object with a ``type`` attribute

    Returns:
        The action type

    Raises:
        InvalidActionError: If the action has no type, or its type is None
    """
    if isinstance(action, Mapping):
        action_type = action.get("type")
    else:
        action_type = getattr(action, "type", None)

    if action_type is None:
        raise InvalidActionError(action)
    return action_type


@dataclass(frozen=True)
class Store:
    """State container.

    Attributes:
        get_state: Read the current state
        dispatch: Apply an action and return the dispatch result
        subscribe: Register a change listener; returns an unsubscribe function
        replace_reducer: Swap the reducer used for subsequent dispatches
    """

    get_state: Callable[[], Any]
    dispatch: Callable[..., Any]
    subscribe: Callable[[Listener], Unsubscribe]
    replace_reducer: Callable[[Reducer], None]


def create_store(
    reducer: Reducer,
    preloaded_state: Any = None,
    enhancer: Callable[..., Any] | None = None,
) -> Store:
    """Create a store holding the state produced by ``reducer``.

    Args:
        reducer: Pure function returning the next state for a state and action
        preloaded_state: Optional initial state
        enhancer: Optional store enhancer, e.g. ``apply_middleware(...)``

    Returns:
        The store, or whatever the enhancer builds from it

    Raises:
        InvalidEnhancerError: If enhancer is not callable
        InvalidReducerError: If reducer is not callable
    """
    if enhancer is not None:
        if not callable(enhancer):
            raise InvalidEnhancerError(f"Expected the enhancer to be callable, got {type(enhancer).__name__}")
        return enhancer(create_store)(reducer, preloaded_state)

    if not callable(reducer):
        raise InvalidReducerError(f"Expected the reducer to be callable, got {type(reducer).__name__}")

    current_reducer = reducer
    current_state = preloaded_state
    listeners: list[Listener] = []
    is_dispatching = False

    def get_state() -> Any:
        if is_dispatching:
            raise ReducerDispatchError(
                "You may not call get_state() while the reducer is executing. "
                "The reducer has already received the state as an argument."
            )
        return current_state

    def subscribe(listener: Listener) -> Unsubscribe:
        if not callable(listener):
            raise TypeError(f"Expected the listener to be callable, got {type(listener).__name__}")
        if is_dispatching:
            raise ReducerDispatchError("You may not call subscribe() while the reducer is executing.")

        listeners.append(listener)
        subscribed = True

        def unsubscribe() -> None:
            nonlocal subscribed
            if not subscribed:
                return
            if is_dispatching:
                raise ReducerDispatchError("You may not unsubscribe from a store listener while the reducer is executing.")
            subscribed = False
            listeners.remove(listener)

        return unsubscribe

    def dispatch(action: Any, *_: Any) -> Any:
        nonlocal current_state, is_dispatching

        get_action_type(action)
        if is_dispatching:
            raise ReducerDispatchError("Reducers may not dispatch actions.")

        is_dispatching = True
        try:
            current_state = current_reducer(current_state, action)
        finally:
            is_dispatching = False

        # Snapshot so listeners may (un)subscribe during notification
        for listener in list(listeners):
            listener()

        return action

    def replace_reducer(next_reducer: Reducer) -> None:
        nonlocal current_reducer
        if not callable(next_reducer):
            raise InvalidReducerError(f"Expected the next reducer to be callable, got {type(next_reducer).__name__}")
        current_reducer = next_reducer
        dispatch({"type": ActionTypes.REPLACE})

    dispatch({"type": ActionTypes.INIT})
    logger.debug("Created store with reducer %s", getattr(reducer, "__name__", repr(reducer)))

    return Store(
        get_state=get_state,
        dispatch=dispatch,
        subscribe=subscribe,
        replace_reducer=replace_reducer,
    )
