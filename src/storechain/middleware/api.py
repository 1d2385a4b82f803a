"""Restricted store API handed to middleware.

Middleware receive a MiddlewareAPI before the composed dispatch exists. Its
``dispatch`` resolves through a DispatchCell at call time, so a reference
captured during construction reaches the composed chain once the cell is bound.

    DispatchCell: UNBOUND (guard) → BOUND (composed dispatch), terminal
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from storechain.errors import DispatchAlreadyBoundError, DispatchDuringConstructionError

# Type aliases
Dispatch = Callable[..., Any]
DispatchTransform = Callable[[Dispatch], Dispatch]
Middleware = Callable[["MiddlewareAPI"], DispatchTransform]


class CellState(Enum):
    """Binding state of a dispatch cell."""

    UNBOUND = "unbound"  # Guard installed, chain not wired yet
    BOUND = "bound"  # Composed dispatch installed


def _construction_guard(*args: Any, **kwargs: Any) -> Any:
    raise DispatchDuringConstructionError()


class DispatchCell:
    """Single-assignment slot for the composed dispatch function.

    Starts UNBOUND, pointing at a guard that raises
    DispatchDuringConstructionError. ``bind`` installs the final dispatch
    exactly once.
    """

    __slots__ = ("_target", "_state")

    def __init__(self) -> None:
        self._target: Dispatch = _construction_guard
        self._state = CellState.UNBOUND

    @property
    def state(self) -> CellState:
        return self._state

    @property
    def is_bound(self) -> bool:
        return self._state is CellState.BOUND

    def bind(self, target: Dispatch) -> None:
        """Point the cell at the composed dispatch function.

        Args:
            target: Fully composed dispatch

        Raises:
            DispatchAlreadyBoundError: If the cell is already bound
            TypeError: If target is not callable
        """
        if self._state is CellState.BOUND:
            raise DispatchAlreadyBoundError()
        if not callable(target):
            raise TypeError(f"Dispatch target must be callable, got {type(target).__name__}")
        self._target = target
        self._state = CellState.BOUND

    def dispatch(self, action: Any, *args: Any) -> Any:
        """Forward to the current target."""
        return self._target(action, *args)

    def __repr__(self) -> str:
        return f"DispatchCell(state={self._state.value})"


@dataclass(frozen=True)
class MiddlewareAPI:
    """Store capabilities available to middleware.

    Attributes:
        get_state: Read the store's current state
        dispatch: Dispatch through the full middleware chain
    """

    get_state: Callable[[], Any]
    dispatch: Dispatch

    @classmethod
    def for_store(cls, get_state: Callable[[], Any], cell: DispatchCell) -> MiddlewareAPI:
        """Build the API view over a store's state and a dispatch cell.

        Args:
            get_state: The base store's state accessor
            cell: Cell that will hold the composed dispatch

        Returns:
            MiddlewareAPI whose dispatch always resolves through ``cell``
        """
        return cls(get_state=get_state, dispatch=cell.dispatch)
