"""State traversal: thread a copyable state object through a derivation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, TypeVar

from .derivation import Derivation
from .errors import StateCopyError
from .module import QueryModule

S = TypeVar("S")


class TraversalState(ABC):
    """Base for values threaded through a derivation (turtle pose and the like).

    ``deep_copy`` must return an independent value sharing no mutable parts
    with the source: a branch works on its copy and the parent sequence
    resumes with its own state afterwards.
    """

    @abstractmethod
    def deep_copy(self: S) -> S: ...

    def shallow_copy(self: S) -> S:
        raise StateCopyError(
            f"{type(self).__name__} does not support shallow copies; use deep_copy()"
        )


def _copier(state: Any) -> Callable[[], Any]:
    copier = getattr(state, "deep_copy", None)
    if not callable(copier):
        raise StateCopyError(
            f"traversal state {type(state).__name__} must provide deep_copy()"
        )
    return copier


def _duplicate(state: S) -> S:
    dup = _copier(state)()
    if dup is state:
        raise StateCopyError(
            f"{type(state).__name__}.deep_copy() returned the same object"
        )
    return dup


def _visit(derivation: Derivation, state: Any) -> None:
    for node in derivation:
        module = node.module
        module.change_state(state)
        if isinstance(module, QueryModule):
            module.query_state(state)
        if node.branch is not None:
            # The branch works on its own copy; ``state`` is left as it was.
            _visit(node.branch, _duplicate(state))


def evaluate(derivation: Derivation, state: S) -> tuple[Derivation, S]:
    """Walk ``derivation`` depth-first, applying every module to ``state``.

    Returns the same derivation (queryable modules now hold their latest
    observation) and the state as it stands after the top-level sequence.
    The structure of the derivation is never changed.
    """
    _copier(state)
    _visit(derivation, state)
    return derivation, state
