"""Store enhancer that installs a middleware chain around dispatch.

Formal Model:
    Middleware mᵢ: API → (Dispatch → Dispatch)

    apply_middleware(m₁, …, mₙ)(create)(r, …) ⇒
        store = create(r, …)
        dispatch = m₁(api)(m₂(api)(…mₙ(api)(store.dispatch)))
"""

from __future__ import annotations

import copy
import dataclasses
import logging
from collections.abc import Callable
from typing import Any

from storechain.compose import compose
from storechain.middleware.api import DispatchCell, Middleware, MiddlewareAPI

logger = logging.getLogger(__name__)


# Type aliases
StoreCreator = Callable[..., Any]
StoreEnhancer = Callable[[StoreCreator], StoreCreator]


def middleware_name(middleware: Middleware) -> str:
    """Get a readable name for a middleware constructor."""
    name = getattr(middleware, "__qualname__", None) or getattr(middleware, "__name__", None)
    if name is None:
        return type(middleware).__name__
    return name


def _replace_dispatch(store: Any, dispatch: Callable[..., Any]) -> Any:
    if dataclasses.is_dataclass(store) and not isinstance(store, type):
        return dataclasses.replace(store, dispatch=dispatch)

    enhanced = copy.copy(store)
    enhanced.dispatch = dispatch
    return enhanced


def apply_middleware(*middlewares: Middleware) -> StoreEnhancer:
    """Create a store enhancer that applies middleware to dispatch.

    Each middleware is called once per store with a MiddlewareAPI and must
    return a function taking the next dispatch and returning a new dispatch.
    The first middleware is the outermost: it sees every action first.

    Args:
        *middlewares: Middleware constructors, outermost first

    Returns:
        Enhancer taking a store creator and returning a store creator with the
        same signature

    Example:
        def tag(api):
            def wrap(next_dispatch):
                def dispatch(action, *args):
                    return next_dispatch({**action, "tagged": True}, *args)
                return dispatch
            return wrap

        store = create_store(reducer, enhancer=apply_middleware(tag))
    """
    chain_names = [middleware_name(m) for m in middlewares]

    def enhancer(create_store: StoreCreator) -> StoreCreator:
        def create_enhanced_store(reducer: Callable[[Any, Any], Any], *args: Any, **kwargs: Any) -> Any:
            store = create_store(reducer, *args, **kwargs)

            cell = DispatchCell()
            api = MiddlewareAPI.for_store(store.get_state, cell)

            chain = [middleware(api) for middleware in middlewares]
            dispatch = compose(*chain)(store.dispatch)
            cell.bind(dispatch)

            logger.debug("Middleware chain: %s", " → ".join([*chain_names, "dispatch"]))

            return _replace_dispatch(store, dispatch)

        return create_enhanced_store

    return enhancer
