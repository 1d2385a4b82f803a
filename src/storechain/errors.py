"""Exception hierarchy for storechain.

Every error raised by the library derives from StoreChainError and also from
the builtin exception that best describes it, so callers can catch either.
"""

from __future__ import annotations


class StoreChainError(Exception):
    """Base class for all storechain errors."""


class DispatchDuringConstructionError(StoreChainError, RuntimeError):
    """Raised when middleware dispatches before the chain is wired."""

    def __init__(self) -> None:
        super().__init__(
            "Dispatching while constructing your middleware is not allowed. "
            "Other middleware would not be applied to this dispatch."
        )


class DispatchAlreadyBoundError(StoreChainError, RuntimeError):
    """Raised when a dispatch cell is bound a second time."""

    def __init__(self) -> None:
        super().__init__("Dispatch cell is already bound to a composed dispatch function.")


class InvalidActionError(StoreChainError, TypeError):
    """Raised when an action has no 'type' discriminant."""

    def __init__(self, action: object) -> None:
        super().__init__(
            f"Actions must be a mapping with a 'type' key or an object with a 'type' attribute, "
            f"got {type(action).__name__}: {action!r}"
        )
        self.action = action


class ReducerDispatchError(StoreChainError, RuntimeError):
    """Raised when the store is used from inside its own reducer."""


class InvalidEnhancerError(StoreChainError, TypeError):
    """Raised when create_store receives a non-callable enhancer."""


class InvalidReducerError(StoreChainError, TypeError):
    """Raised when a store is given a non-callable reducer."""


class ConfigError(StoreChainError, ValueError):
    """Raised when configuration cannot be resolved."""
