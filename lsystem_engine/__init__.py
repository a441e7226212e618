"""Generic, type-driven L-system engine.

Build an axiom from :class:`Node` objects wrapping :class:`Module`
instances, describe rewrite rules as :class:`Production` objects and step
them with :class:`LSystem`::

    lsys = LSystem(axiom, productions, rng=random.Random(1))
    lsys.run_production()
    lsys.get_current_derivation(TurtleState()).render()
"""

from .derivation import Derivation, Node, NodeContext
from .engine import select_production, step
from .errors import (
    ConfigError,
    DerivationError,
    LSystemError,
    ProductionError,
    StateCopyError,
)
from .lsystem import LSystem
from .module import Module, QueryModule, is_queryable, variant_of
from .production import (
    Production,
    RandomSource,
    always,
    certain,
    chance,
    identity_successor,
)
from .state import TraversalState, evaluate

__all__ = [
    "ConfigError",
    "Derivation",
    "DerivationError",
    "LSystem",
    "LSystemError",
    "Module",
    "Node",
    "NodeContext",
    "Production",
    "ProductionError",
    "QueryModule",
    "RandomSource",
    "StateCopyError",
    "TraversalState",
    "always",
    "certain",
    "chance",
    "evaluate",
    "identity_successor",
    "is_queryable",
    "select_production",
    "step",
    "variant_of",
]
