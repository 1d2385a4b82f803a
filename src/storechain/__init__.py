"""storechain: middleware chains for dispatch-based state stores.

    store = create_store(reducer, initial_state, apply_middleware(m1, m2))
    store.dispatch({"type": "increment"})  # m1 → m2 → reducer
"""

from storechain.compose import compose
from storechain.errors import (
    ConfigError,
    DispatchAlreadyBoundError,
    DispatchDuringConstructionError,
    InvalidActionError,
    InvalidEnhancerError,
    InvalidReducerError,
    ReducerDispatchError,
    StoreChainError,
)
from storechain.middleware import (
    CellState,
    Dispatch,
    DispatchCell,
    Middleware,
    MiddlewareAPI,
    StoreCreator,
    StoreEnhancer,
    apply_middleware,
)
from storechain.store import ActionTypes, Reducer, Store, create_store, get_action_type

__all__ = [
    "apply_middleware",
    "compose",
    "create_store",
    "get_action_type",
    "ActionTypes",
    "CellState",
    "Dispatch",
    "DispatchCell",
    "Middleware",
    "MiddlewareAPI",
    "Reducer",
    "Store",
    "StoreCreator",
    "StoreEnhancer",
    "StoreChainError",
    "ConfigError",
    "DispatchAlreadyBoundError",
    "DispatchDuringConstructionError",
    "InvalidActionError",
    "InvalidEnhancerError",
    "InvalidReducerError",
    "ReducerDispatchError",
]
