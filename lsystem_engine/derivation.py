"""Derivation: one generation of an L-system as an ordered, branching sequence.

Each level is a tuple of nodes. A node may own a nested derivation (its
branch), which is reachable only through that node: ``previous``/``next``
are plain index arithmetic within one level and never step into or out of a
branch.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, overload

from .errors import DerivationError
from .module import Module, variant_of


@dataclass(frozen=True)
class Node:
    step_created: int
    module: Module
    branch: Derivation | None = None

    def __post_init__(self) -> None:
        variant_of(self.module)
        if self.branch is not None and not isinstance(self.branch, Derivation):
            raise DerivationError(
                f"node branch must be a Derivation, got {type(self.branch).__name__}"
            )


class Derivation:
    __slots__ = ("_nodes",)

    def __init__(self, nodes: Iterable[Node] = ()) -> None:
        items = tuple(nodes)
        for i, node in enumerate(items):
            if not isinstance(node, Node):
                raise DerivationError(
                    f"derivation item {i} must be a Node, got {type(node).__name__}"
                )
        self._nodes: tuple[Node, ...] = items

    @classmethod
    def of(cls, *nodes: Node) -> Derivation:
        return cls(nodes)

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    @overload
    def __getitem__(self, index: int) -> Node: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Node, ...]: ...

    def __getitem__(self, index: Any) -> Any:
        return self._nodes[index]

    def __bool__(self) -> bool:
        return bool(self._nodes)

    def previous(self, index: int) -> Node | None:
        if index <= 0:
            return None
        return self._nodes[index - 1]

    def next(self, index: int) -> Node | None:
        if index + 1 >= len(self._nodes):
            return None
        return self._nodes[index + 1]

    def walk(self) -> Iterator[Node]:
        """Yield every node depth-first: a node, then its branch, then its sibling."""
        for node in self._nodes:
            yield node
            if node.branch is not None:
                yield from node.branch.walk()

    def size(self) -> int:
        return sum(1 for _ in self.walk())

    def depth(self) -> int:
        """Deepest branch nesting below this level (0 when there are no branches)."""
        deepest = 0
        for node in self._nodes:
            if node.branch is not None:
                deepest = max(deepest, 1 + node.branch.depth())
        return deepest

    def render(self) -> str:
        parts: list[str] = []
        for node in self._nodes:
            parts.append(node.module.label())
            if node.branch is not None:
                parts.append(f"[{node.branch.render()}]")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Derivation({self.render()!r})"


@dataclass(frozen=True)
class NodeContext:
    """Read-only view of a node and its neighbours in the generation being rewritten.

    ``rewritten_branch`` is the node's branch as it stands after the current
    step (None when the node has no branch). A successor generator that wants
    to keep the branch attaches it to one of the nodes it returns.
    """

    derivation: Derivation
    index: int
    rewritten_branch: Derivation | None = None

    @property
    def node(self) -> Node:
        return self.derivation[self.index]

    @property
    def module(self) -> Module:
        return self.node.module

    @property
    def previous(self) -> Node | None:
        return self.derivation.previous(self.index)

    @property
    def next(self) -> Node | None:
        return self.derivation.next(self.index)

    @property
    def left(self) -> Module | None:
        prev = self.previous
        return prev.module if prev is not None else None

    @property
    def right(self) -> Module | None:
        nxt = self.next
        return nxt.module if nxt is not None else None
