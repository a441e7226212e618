#!/usr/bin/env python3
import pytest

from lsystem_engine import (
    Derivation,
    DerivationError,
    Module,
    Node,
    NodeContext,
    QueryModule,
    is_queryable,
    variant_of,
)


class A(Module):
    symbol = "A"

    def change_state(self, state: object) -> None:
        pass


class B(Module):
    symbol = "B"

    def change_state(self, state: object) -> None:
        pass


class Probe(QueryModule):
    def change_state(self, state: object) -> None:
        pass

    def query_state(self, state: object) -> None:
        self.data = state


def n(module: Module, branch: Derivation | None = None) -> Node:
    return Node(0, module, branch)


class TestModule:
    def test_label_with_and_without_data(self) -> None:
        assert A(1).label() == "A(1)"
        assert A().label() == "A"

    def test_label_defaults_to_class_name(self) -> None:
        assert Probe().label() == "Probe"

    def test_variant_is_concrete_class(self) -> None:
        assert variant_of(A(1)) is A
        assert variant_of(B(1)) is B

    def test_variant_of_non_module_raises(self) -> None:
        with pytest.raises(DerivationError):
            variant_of("A")

    def test_is_queryable(self) -> None:
        assert is_queryable(Probe())
        assert not is_queryable(A())

    def test_module_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            Module()  # type: ignore[abstract]


class TestNode:
    def test_rejects_non_module(self) -> None:
        with pytest.raises(DerivationError):
            Node(0, "A")  # type: ignore[arg-type]

    def test_rejects_non_derivation_branch(self) -> None:
        with pytest.raises(DerivationError):
            Node(0, A(), [n(B())])  # type: ignore[arg-type]

    def test_step_created_is_kept(self) -> None:
        assert Node(3, A()).step_created == 3


class TestDerivation:
    def setup_method(self) -> None:
        # A(1) B(2)[A(3) A(4)] A(5)
        self.inner = Derivation.of(n(A(3)), n(A(4)))
        self.d = Derivation.of(n(A(1)), n(B(2), self.inner), n(A(5)))

    def test_rejects_non_node_items(self) -> None:
        with pytest.raises(DerivationError):
            Derivation([n(A()), A()])  # type: ignore[list-item]

    def test_sequence_protocol(self) -> None:
        assert len(self.d) == 3
        assert [node.module.data for node in self.d] == [1, 2, 5]
        assert self.d[1].branch is self.inner
        assert bool(self.d)
        assert not Derivation()

    def test_previous_and_next_stay_on_one_level(self) -> None:
        assert self.d.previous(0) is None
        assert self.d.next(2) is None
        # The branch of B is skipped: A(5) follows B(2) directly.
        assert self.d.next(1) is self.d[2]
        assert self.d.previous(2) is self.d[1]

    def test_branch_ends_have_no_neighbours(self) -> None:
        assert self.inner.previous(0) is None
        assert self.inner.next(1) is None

    def test_walk_visits_branch_before_sibling(self) -> None:
        order = [node.module.data for node in self.d.walk()]
        assert order == [1, 2, 3, 4, 5]

    def test_size_and_depth(self) -> None:
        assert self.d.size() == 5
        assert self.d.depth() == 1
        nested = Derivation.of(n(A(), Derivation.of(n(A(), Derivation.of(n(B()))))))
        assert nested.depth() == 2
        assert Derivation.of(n(A())).depth() == 0

    def test_render(self) -> None:
        assert self.d.render() == "A(1)B(2)[A(3)A(4)]A(5)"
        assert Derivation().render() == ""


class TestNodeContext:
    def test_neighbours(self) -> None:
        d = Derivation.of(n(A(1)), n(B(2)), n(A(3)))
        ctx = NodeContext(d, 1)
        assert ctx.node is d[1]
        assert ctx.module.data == 2
        assert ctx.left is d[0].module
        assert ctx.right is d[2].module
        assert ctx.rewritten_branch is None

    def test_missing_neighbours_are_none(self) -> None:
        d = Derivation.of(n(A(1)))
        ctx = NodeContext(d, 0)
        assert ctx.previous is None
        assert ctx.next is None
        assert ctx.left is None
        assert ctx.right is None
