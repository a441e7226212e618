"""JSON grammar files for single-character symbol L-systems.

A grammar file looks like::

    {
      "name": "Branching weed",
      "axiom": "ABA",
      "iterations": 3,
      "seed": 7,
      "productions": [
        {"left": "A", "predecessor": "B", "right": "A", "successor": "B[A]"},
        {"predecessor": "A", "successor": "AB", "probability": 0.5}
      ]
    }

Words are strings of single-character symbols. ``X[...]`` makes the bracket
group the branch of ``X``; every symbol owns at most one branch. Whitespace
is ignored. Productions are tried in file order.
"""

from __future__ import annotations

import json
import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, cast

from .derivation import Derivation, Node, NodeContext
from .errors import ConfigError, _require
from .lsystem import LSystem
from .module import Module
from .production import Production, RandomSource, certain, chance

BRANCH_OPEN = "["
BRANCH_CLOSE = "]"


def _as_float(x: Any, path: str) -> float:
    _require(
        isinstance(x, (int, float)) and not isinstance(x, bool),
        f"{path} must be a number",
    )
    return float(x)


def _as_int(x: Any, path: str) -> int:
    _require(
        isinstance(x, int) and not isinstance(x, bool), f"{path} must be an integer"
    )
    return int(x)


def _as_str(x: Any, path: str) -> str:
    _require(isinstance(x, str), f"{path} must be a string")
    return cast(str, x)


def _as_dict(x: Any, path: str) -> dict[str, Any]:
    _require(isinstance(x, dict), f"{path} must be an object")
    return cast(dict[str, Any], x)


def _as_list(x: Any, path: str) -> list[Any]:
    _require(isinstance(x, list), f"{path} must be an array")
    return cast(list[Any], x)


def _as_symbol(x: Any, path: str) -> str:
    s = _as_str(x, path)
    _require(
        len(s) == 1 and not s.isspace() and s not in (BRANCH_OPEN, BRANCH_CLOSE),
        f"{path} must be a single non-bracket character",
    )
    return s


# -------------------------
# Symbols and words
# -------------------------


class Symbol(Module):
    """Payload-free module standing for one character of a grammar word."""

    symbol = "?"

    def change_state(self, state: Any) -> None:
        pass


class SymbolTable:
    """One ``Symbol`` subclass per character, so each character is its own variant."""

    def __init__(self) -> None:
        self._types: dict[str, type[Symbol]] = {}

    def module_type(self, ch: str) -> type[Symbol]:
        t = self._types.get(ch)
        if t is None:
            t = cast(
                "type[Symbol]",
                type(f"Symbol({ch!r})", (Symbol,), {"symbol": ch}),
            )
            self._types[ch] = t
        return t

    def parse_word(self, word: str, step: int = 0) -> list[Node]:
        """Turn ``word`` into fresh nodes created at ``step``."""
        # Each entry is [symbol, children]; children stays None until a
        # bracket group opens right after the symbol.
        root: list[list[Any]] = []
        stack: list[list[list[Any]]] = [root]
        for pos, ch in enumerate(word):
            if ch.isspace():
                continue
            level = stack[-1]
            if ch == BRANCH_OPEN:
                _require(
                    bool(level), f"'{BRANCH_OPEN}' at {pos} in {word!r} has no symbol"
                )
                owner = level[-1]
                _require(
                    owner[1] is None,
                    f"symbol '{owner[0]}' at {pos} in {word!r} already has a branch",
                )
                owner[1] = []
                stack.append(owner[1])
            elif ch == BRANCH_CLOSE:
                _require(
                    len(stack) > 1,
                    f"unbalanced '{BRANCH_CLOSE}' at {pos} in {word!r}",
                )
                stack.pop()
            else:
                level.append([ch, None])
        _require(len(stack) == 1, f"unclosed '{BRANCH_OPEN}' in {word!r}")
        return self._build(root, step)

    def _build(self, entries: list[list[Any]], step: int) -> list[Node]:
        nodes: list[Node] = []
        for ch, children in entries:
            branch = None
            if children is not None:
                branch = Derivation(self._build(children, step))
            nodes.append(Node(step, self.module_type(ch)(), branch))
        return nodes


def _word_successor(
    table: SymbolTable, word: str
) -> Callable[[int, NodeContext], list[Node]]:
    def successor(step_number: int, ctx: NodeContext) -> list[Node]:
        nodes = table.parse_word(word, step_number)
        # Keep the rewritten branch on the last successor unless it already
        # has one of its own.
        if ctx.rewritten_branch is not None and nodes and nodes[-1].branch is None:
            last = nodes[-1]
            nodes[-1] = Node(last.step_created, last.module, ctx.rewritten_branch)
        return nodes

    return successor


# -------------------------
# Config model
# -------------------------


@dataclass(frozen=True)
class ProductionConfig:
    predecessor: str
    successor: str
    left: str | None = None
    right: str | None = None
    probability: float | None = None

    def build(self, table: SymbolTable, name: str) -> Production:
        return Production(
            table.module_type(self.predecessor),
            _word_successor(table, self.successor),
            left=table.module_type(self.left) if self.left is not None else None,
            right=table.module_type(self.right) if self.right is not None else None,
            probability=(
                chance(self.probability) if self.probability is not None else certain
            ),
            name=name,
        )

    def describe(self) -> str:
        rule = self.predecessor
        if self.left is not None:
            rule = f"{self.left} < {rule}"
        if self.right is not None:
            rule = f"{rule} > {self.right}"
        out = f"{rule} -> {self.successor or '(empty)'}"
        if self.probability is not None:
            out += f" (p={self.probability:g})"
        return out


@dataclass(frozen=True)
class GrammarConfig:
    name: str
    axiom: str
    iterations: int
    seed: int | None
    productions: tuple[ProductionConfig, ...]

    def build(self, rng: RandomSource | None = None) -> LSystem:
        table = SymbolTable()
        axiom = Derivation(table.parse_word(self.axiom, 0))
        productions = [
            p.build(table, f"{self.name}#{i}") for i, p in enumerate(self.productions)
        ]
        if rng is None:
            rng = random.Random(self.seed)
        return LSystem(axiom, productions, rng)

    def symbols(self) -> set[str]:
        words = [self.axiom]
        for p in self.productions:
            words.append(p.successor)
            words.extend(s for s in (p.predecessor, p.left, p.right) if s is not None)
        return {
            ch
            for word in words
            for ch in word
            if not ch.isspace() and ch not in (BRANCH_OPEN, BRANCH_CLOSE)
        }


def _parse_production(obj: Any, path: str) -> ProductionConfig:
    obj = _as_dict(obj, path)
    unknown = set(obj) - {"predecessor", "successor", "left", "right", "probability"}
    _require(not unknown, f"{path} has unknown keys: {', '.join(sorted(unknown))}")
    _require("predecessor" in obj, f"{path}.predecessor is required")
    _require("successor" in obj, f"{path}.successor is required")

    predecessor = _as_symbol(obj["predecessor"], f"{path}.predecessor")
    successor = _as_str(obj["successor"], f"{path}.successor")
    # Validate brackets now rather than on the first step.
    SymbolTable().parse_word(successor)

    left = obj.get("left")
    if left is not None:
        left = _as_symbol(left, f"{path}.left")
    right = obj.get("right")
    if right is not None:
        right = _as_symbol(right, f"{path}.right")

    probability = obj.get("probability")
    if probability is not None:
        probability = _as_float(probability, f"{path}.probability")
        _require(
            0.0 <= probability <= 1.0, f"{path}.probability must be between 0 and 1"
        )

    return ProductionConfig(
        predecessor=predecessor,
        successor=successor,
        left=left,
        right=right,
        probability=probability,
    )


def parse_config(obj: dict[str, Any]) -> GrammarConfig:
    obj = _as_dict(obj, "root")

    name = _as_str(obj.get("name", "L-System"), "name")
    axiom = _as_str(obj.get("axiom", ""), "axiom")
    _require(bool(axiom.strip()), "axiom must be non-empty")
    SymbolTable().parse_word(axiom)

    iterations = _as_int(obj.get("iterations", 0), "iterations")
    _require(iterations >= 0, "iterations must be >= 0")

    seed = obj.get("seed")
    if seed is not None:
        seed = _as_int(seed, "seed")

    productions_obj = _as_list(obj.get("productions", []), "productions")
    productions = tuple(
        _parse_production(p, f"productions[{i}]")
        for i, p in enumerate(productions_obj)
    )

    return GrammarConfig(
        name=name,
        axiom=axiom,
        iterations=iterations,
        seed=seed,
        productions=productions,
    )


def load_json(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        try:
            return cast(dict[str, Any], json.load(f))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e
