"""Rewrite engine: one synchronised generation step.

Every node is matched against the generation being rewritten, never against
nodes produced earlier in the same step. The old derivation is only read;
the new one is assembled separately and handed back once complete, so an
exception from any production callback leaves the caller's derivation as it
was.
"""

from __future__ import annotations

from collections.abc import Sequence

from .derivation import Derivation, Node, NodeContext
from .errors import DerivationError
from .production import Production, RandomSource, identity_successor


def select_production(
    ctx: NodeContext, productions: Sequence[Production], rng: RandomSource
) -> Production | None:
    """Return the first production whose type, context, condition and gate hold.

    The probability gate of a production is evaluated at most once, and only
    after its type slots and condition passed. Once a gate succeeds no later
    production is looked at, so no further random draws are consumed.
    """
    for production in productions:
        if not production.matches_context(ctx):
            continue
        if not production.condition(ctx):
            continue
        if production.probability(ctx, rng):
            return production
    return None


def _successors(
    production: Production, step_number: int, ctx: NodeContext
) -> list[Node]:
    out = list(production.successor(step_number, ctx))
    for node in out:
        if not isinstance(node, Node):
            raise DerivationError(
                f"{production}: successor produced {type(node).__name__}, "
                "expected Node"
            )
    return out


def _rewrite_level(
    level: Derivation,
    productions: Sequence[Production],
    step_number: int,
    rng: RandomSource,
) -> list[Node]:
    out: list[Node] = []
    for index, node in enumerate(level):
        rewritten_branch = None
        if node.branch is not None:
            # Branches are their own context scope; rewriting one first is
            # not observable from this level.
            rewritten_branch = step(node.branch, productions, step_number, rng)

        ctx = NodeContext(level, index, rewritten_branch)
        production = select_production(ctx, productions, rng)
        if production is None:
            out.extend(identity_successor(step_number, ctx))
        else:
            out.extend(_successors(production, step_number, ctx))
    return out


def step(
    derivation: Derivation,
    productions: Sequence[Production],
    step_number: int,
    rng: RandomSource,
) -> Derivation:
    """Rewrite ``derivation`` once and return the next generation."""
    return Derivation(_rewrite_level(derivation, productions, step_number, rng))
