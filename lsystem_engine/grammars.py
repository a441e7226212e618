"""Built-in demonstration grammars.

``context-sensitive``: integer-tagged ``A``/``B`` symbols with stochastic
rules for ``A`` and a context rule ``A < B > A`` that spawns a branch.

``parametric``: a grid-turtle spiral that grows by one segment per step and
records the turtle position after every segment.
"""

from __future__ import annotations

from collections.abc import Callable

from .derivation import Derivation, Node, NodeContext
from .module import Module
from .production import Production, chance
from .turtle import EndPoint, MoveForward, QueryPoint, Rotate

Grammar = tuple[Derivation, list[Production]]


# -------------------------
# Context-sensitive
# -------------------------


class ModuleA(Module):
    symbol = "A"

    def change_state(self, state: object) -> None:
        pass


class ModuleB(Module):
    symbol = "B"

    def change_state(self, state: object) -> None:
        pass


def _a_grows(step_number: int, ctx: NodeContext) -> list[Node]:
    return [Node(step_number, ModuleA(ctx.module.data + 1))]


def _a_turns_b(step_number: int, ctx: NodeContext) -> list[Node]:
    return [Node(step_number, ModuleB(ctx.module.data - 1))]


def _b_below_four(ctx: NodeContext) -> bool:
    return ctx.module.data < 4


def _b_branches(step_number: int, ctx: NodeContext) -> list[Node]:
    # left/right are guaranteed by the A < B > A context.
    assert ctx.left is not None and ctx.right is not None
    branch = Derivation.of(Node(step_number, ModuleA(ctx.module.data)))
    return [Node(step_number, ModuleB(ctx.left.data + ctx.right.data), branch)]


def context_sensitive() -> Grammar:
    axiom = Derivation.of(
        Node(0, ModuleA(1)),
        Node(0, ModuleB(2)),
        Node(0, ModuleA(3)),
    )
    productions = [
        Production(ModuleA, _a_grows, probability=chance(0.4), name="A grows"),
        Production(ModuleA, _a_turns_b, probability=chance(0.6), name="A turns B"),
        Production(
            ModuleB,
            _b_branches,
            left=ModuleA,
            right=ModuleA,
            condition=_b_below_four,
            name="A<B>A branches",
        ),
    ]
    return axiom, productions


# -------------------------
# Parametric
# -------------------------


def _tip_extends(step_number: int, ctx: NodeContext) -> list[Node]:
    return [
        Node(step_number, MoveForward(1)),
        Node(step_number, QueryPoint()),
        Node(step_number, Rotate(90)),
        Node(step_number, EndPoint()),
    ]


def _segment_lengthens(step_number: int, ctx: NodeContext) -> list[Node]:
    return [Node(step_number, MoveForward(ctx.module.data + 1))]


def parametric() -> Grammar:
    axiom = Derivation.of(Node(0, EndPoint()))
    productions = [
        Production(EndPoint, _tip_extends, name="tip extends"),
        Production(MoveForward, _segment_lengthens, name="segment lengthens"),
    ]
    return axiom, productions


DEMOS: dict[str, Callable[[], Grammar]] = {
    "context-sensitive": context_sensitive,
    "parametric": parametric,
}
