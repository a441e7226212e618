"""Productions: context-sensitive, conditional, probabilistic rewrite rules."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from .derivation import Node, NodeContext
from .errors import ProductionError, _require
from .module import Module, is_module_type


@runtime_checkable
class RandomSource(Protocol):
    """Anything yielding uniform floats in [0, 1); ``random.Random`` qualifies."""

    def random(self) -> float: ...


Condition = Callable[[NodeContext], bool]
Probability = Callable[[NodeContext, RandomSource], bool]
Successor = Callable[[int, NodeContext], Iterable[Node]]


def always(ctx: NodeContext) -> bool:
    return True


def certain(ctx: NodeContext, rng: RandomSource) -> bool:
    # No draw: productions without a probability gate consume no randomness.
    return True


def chance(p: float) -> Probability:
    """Return a gate that succeeds when one uniform draw is <= ``p``."""
    _require(
        isinstance(p, (int, float)) and not isinstance(p, bool),
        "probability must be a number",
    )
    _require(0.0 <= p <= 1.0, f"probability must be between 0 and 1; got {p!r}")
    threshold = float(p)

    def gate(ctx: NodeContext, rng: RandomSource) -> bool:
        return rng.random() <= threshold

    gate.__name__ = f"chance({threshold})"
    return gate


def identity_successor(step_number: int, ctx: NodeContext) -> list[Node]:
    """Carry the node forward unchanged, keeping its rewritten branch."""
    node = ctx.node
    return [Node(node.step_created, node.module, ctx.rewritten_branch)]


def _type_name(t: type[Module] | None) -> str:
    return "*" if t is None else t.__name__


@dataclass(frozen=True)
class Production:
    """Rewrite rule ``left < predecessor > right : condition -> successor``.

    ``left``/``right`` of None are wildcards that hold whether or not a
    neighbour exists. A concrete type requires a neighbour at the same level
    whose module is exactly that class.
    """

    predecessor: type[Module]
    successor: Successor
    left: type[Module] | None = None
    right: type[Module] | None = None
    condition: Condition = always
    probability: Probability = certain
    name: str | None = None

    def __post_init__(self) -> None:
        if not is_module_type(self.predecessor):
            raise ProductionError(
                f"{self._describe()}: predecessor must be a Module subclass, "
                f"got {self.predecessor!r}"
            )
        for slot in ("left", "right"):
            value = getattr(self, slot)
            if value is not None and not is_module_type(value):
                raise ProductionError(
                    f"{self._describe()}: {slot} context must be None or a "
                    f"Module subclass, got {value!r}"
                )
        for slot in ("successor", "condition", "probability"):
            if not callable(getattr(self, slot)):
                raise ProductionError(f"{self._describe()}: {slot} must be callable")

    def _describe(self) -> str:
        if self.name:
            return f"production {self.name!r}"
        return "production"

    def matches_context(self, ctx: NodeContext) -> bool:
        """Check the type slots: predecessor, left and right context."""
        if type(ctx.module) is not self.predecessor:
            return False
        if self.left is not None:
            left = ctx.left
            if left is None or type(left) is not self.left:
                return False
        if self.right is not None:
            right = ctx.right
            if right is None or type(right) is not self.right:
                return False
        return True

    def __str__(self) -> str:
        rule = (
            f"{_type_name(self.left)} < {_type_name(self.predecessor)} "
            f"> {_type_name(self.right)}"
        )
        return f"{self.name}: {rule}" if self.name else rule
