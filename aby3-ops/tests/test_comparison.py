"""
Tests for the comparison-and-reveal protocol.
"""

import pytest
import torch

from fake_engine import BrokenRevealEngine, share

from aby3_ops.aby3.comparison import PREDICATES, check_binary, complement_
from aby3_ops.errors import NonBinaryReveal, PrimitiveFailure
from aby3_ops.factory import FactoryConfig, ProtocolFactory

A = [-2.0, -0.5, 0.0, 0.5, 1.0, 3.25]
B = [1.0, -0.5, 0.0, 0.25, 1.0, -3.25]


def compare(ctx, name, a, b):
    out = ctx.empty_plain((len(b),))
    getattr(ctx.operators, name)(share(a), torch.tensor(b), out)
    return out.tolist()


class TestPredicateTable:
    """Six predicates from three secret-domain comparisons."""

    def test_primitives_used(self):
        assert {p.primitive for p in PREDICATES.values()} == {"gt", "lt", "eq"}

    @pytest.mark.parametrize("name,primitive", [("geq", "lt"), ("leq", "gt"), ("neq", "eq")])
    def test_derived_are_complements(self, name, primitive):
        pred = PREDICATES[name]
        assert pred.complement
        assert pred.primitive == primitive

    @pytest.mark.parametrize("name", ["gt", "lt", "eq"])
    def test_primitive_predicates_are_not_complemented(self, name):
        assert not PREDICATES[name].complement


class TestPrimitivePredicates:
    def test_gt(self, ctx):
        assert compare(ctx, "gt", A, B) == [0, 0, 0, 1, 0, 1]

    def test_lt(self, ctx):
        assert compare(ctx, "lt", A, B) == [1, 0, 0, 0, 0, 0]

    def test_eq(self, ctx):
        assert compare(ctx, "eq", A, B) == [0, 1, 1, 0, 1, 0]

    def test_single_comparison_and_reveal(self, ctx, engine):
        compare(ctx, "gt", A, B)
        assert engine.primitive_calls == ["gt", "reveal"]
        assert engine.bool_buffers_fresh == [True]

    def test_output_shape_follows_comparand(self, ctx):
        out = ctx.empty_plain((2, 2))
        ctx.operators.lt(share([[0.0, 1.0], [2.0, 3.0]]), torch.full((2, 2), 1.5), out)
        assert out.tolist() == [[1, 1], [0, 0]]


class TestDerivedPredicates:
    def test_geq(self, ctx):
        assert compare(ctx, "geq", A, B) == [0, 1, 1, 1, 1, 1]

    def test_leq(self, ctx):
        assert compare(ctx, "leq", A, B) == [1, 1, 1, 0, 1, 0]

    def test_neq(self, ctx):
        assert compare(ctx, "neq", A, B) == [1, 0, 0, 1, 0, 1]

    @pytest.mark.parametrize("derived,base", [("geq", "lt"), ("leq", "gt"), ("neq", "eq")])
    def test_complementarity(self, ctx, derived, base):
        d = compare(ctx, derived, A, B)
        b = compare(ctx, base, A, B)
        assert d == [1 - v for v in b]

    @pytest.mark.parametrize("derived,primitive", [("geq", "lt"), ("leq", "gt"), ("neq", "eq")])
    def test_no_extra_secret_comparison(self, ctx, engine, derived, primitive):
        compare(ctx, derived, A, B)
        assert engine.primitive_calls == [primitive, "reveal"]


class TestConsistency:
    def test_exactly_one_of_gt_eq_lt(self, ctx):
        gen = torch.Generator().manual_seed(3)
        a = (torch.randint(-8, 8, (64,), generator=gen) / 4.0).tolist()
        b = (torch.randint(-8, 8, (64,), generator=gen) / 4.0).tolist()
        gt = compare(ctx, "gt", a, b)
        eq = compare(ctx, "eq", a, b)
        lt = compare(ctx, "lt", a, b)
        assert all(x + y + z == 1 for x, y, z in zip(gt, eq, lt))

    def test_equality_below_precision(self, ctx):
        # differ by far less than 2^-16: same fixed-point encoding
        assert compare(ctx, "eq", [1.0], [1.0 + 2.0 ** -24]) == [1]


class TestRevealCheck:
    def test_check_binary_accepts_bits(self):
        check_binary(torch.tensor([0, 1, 1, 0]), op="gt")

    def test_check_binary_rejects_other_values(self):
        with pytest.raises(NonBinaryReveal):
            check_binary(torch.tensor([0, 2, 1]), op="gt")

    def test_complement_in_place(self):
        t = torch.tensor([0, 1, 1, 0])
        assert complement_(t) is t
        assert t.tolist() == [1, 0, 0, 1]

    def test_non_binary_reveal_is_a_primitive_failure(self):
        ctx = ProtocolFactory().build(BrokenRevealEngine(), party_id=1)
        with pytest.raises(PrimitiveFailure) as exc:
            compare(ctx, "geq", A, B)
        assert isinstance(exc.value, NonBinaryReveal)
        assert exc.value.op == "geq"

    def test_check_can_be_disabled(self):
        ctx = ProtocolFactory(FactoryConfig(check_reveal=False)).build(BrokenRevealEngine(), party_id=1)
        assert compare(ctx, "gt", A, B) == [0, 0, 0, 2, 0, 2]
