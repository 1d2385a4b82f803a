"""Middleware chains for store dispatch.

This module implements the dispatch interception layer with:
- A store enhancer that wires middleware around the base dispatch
- A single-assignment dispatch cell guarding construction-time dispatch
- A restricted store API shared by every middleware in a chain

Formal Model:
    Middleware mᵢ = api → next → action → result

    dispatch = compose(m₁(api), …, mₙ(api))(store.dispatch)
"""

from storechain.middleware.api import (
    CellState,
    Dispatch,
    DispatchCell,
    DispatchTransform,
    Middleware,
    MiddlewareAPI,
)
from storechain.middleware.apply import StoreCreator, StoreEnhancer, apply_middleware, middleware_name

__all__ = [
    "apply_middleware",
    "middleware_name",
    "CellState",
    "Dispatch",
    "DispatchCell",
    "DispatchTransform",
    "Middleware",
    "MiddlewareAPI",
    "StoreCreator",
    "StoreEnhancer",
]
