"""Module types: the symbols a derivation is made of.

A module's variant tag is its concrete class. Productions name classes for
their predecessor and context slots and matching compares them exactly, so a
subclass of ``ModuleA`` is a different symbol from ``ModuleA`` itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .errors import DerivationError


class Module(ABC):
    """A symbol instance carrying an optional data payload."""

    symbol: str | None = None

    def __init__(self, data: Any = None) -> None:
        self.data = data

    @abstractmethod
    def change_state(self, state: Any) -> None:
        """Apply this symbol's effect to the traversal state in place."""

    def label(self) -> str:
        name = self.symbol if self.symbol is not None else type(self).__name__
        if self.data is None:
            return name
        return f"{name}({self.data})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.data!r})"


class QueryModule(Module):
    """A module that records an observation of the state after changing it.

    ``query_state`` may write into ``self.data`` but must not keep a
    reference to the state object.
    """

    @abstractmethod
    def query_state(self, state: Any) -> None: ...


def is_queryable(module: Module) -> bool:
    return isinstance(module, QueryModule)


def variant_of(module: Any) -> type[Module]:
    if not isinstance(module, Module):
        raise DerivationError(
            f"expected a Module instance, got {type(module).__name__}"
        )
    return type(module)


def is_module_type(obj: Any) -> bool:
    return isinstance(obj, type) and issubclass(obj, Module)
