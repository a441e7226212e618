"""LSystem: owns the current generation and the ordered production list."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from typing import Any

from .derivation import Derivation, Node
from .engine import step
from .errors import ProductionError, _require
from .production import Production, RandomSource
from .state import evaluate

logger = logging.getLogger(__name__)


class LSystem:
    """Step-and-replay facade over the rewrite engine.

    Not safe for concurrent use: callers sharing one instance across threads
    must serialise ``run_production`` and ``get_current_derivation``.
    """

    def __init__(
        self,
        axiom: Derivation | Iterable[Node],
        productions: Iterable[Production],
        rng: RandomSource | None = None,
    ) -> None:
        if not isinstance(axiom, Derivation):
            axiom = Derivation(axiom)
        self._productions: tuple[Production, ...] = tuple(productions)
        for i, production in enumerate(self._productions):
            if not isinstance(production, Production):
                raise ProductionError(
                    f"productions[{i}] must be a Production, "
                    f"got {type(production).__name__}"
                )
        _require(
            rng is None or isinstance(rng, RandomSource),
            "rng must provide random() -> float",
        )
        self._rng: RandomSource = rng if rng is not None else random.Random()
        self._current = axiom
        self._step_count = 0

    @property
    def current(self) -> Derivation:
        return self._current

    @property
    def step_count(self) -> int:
        return self._step_count

    @property
    def productions(self) -> tuple[Production, ...]:
        return self._productions

    def run_production(self) -> Derivation:
        """Derive the next generation and make it current.

        If a production callback raises, the current generation and the step
        counter stay as they were and the exception propagates.
        """
        step_number = self._step_count + 1
        new = step(self._current, self._productions, step_number, self._rng)
        self._current = new
        self._step_count = step_number
        logger.debug(
            "step %d: %d top-level nodes, %d total",
            step_number,
            len(new),
            new.size(),
        )
        return new

    def run(self, steps: int) -> Derivation:
        _require(
            isinstance(steps, int) and not isinstance(steps, bool),
            "steps must be an integer",
        )
        _require(steps >= 0, "steps must be >= 0")
        for _ in range(steps):
            self.run_production()
        return self._current

    def get_current_derivation(self, initial_state: Any = None) -> Derivation:
        """Return the current generation, replaying it over ``initial_state`` if given.

        Replaying calls every module's ``change_state`` (and ``query_state``
        for queryable modules) so their payloads reflect that state. Without
        a state no module hook runs.
        """
        if initial_state is None:
            return self._current
        derivation, _ = evaluate(self._current, initial_state)
        return derivation

    def __repr__(self) -> str:
        return (
            f"LSystem(step={self._step_count}, "
            f"productions={len(self._productions)}, current={self._current!r})"
        )
