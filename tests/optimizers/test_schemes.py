"""Tests for the conjugate-direction scheme coefficients.

The reference values below are computed by hand for
grad = (1, 2), prev_grad = (2, 0) and transported previous direction (-1, 1)
in the plane with identity transport:

    ||grad||^2 = 5, ||prev_grad||^2 = 4, grad - prev_grad = (-1, 2)
    <grad, grad - prev_grad> = 3, <dir, grad - prev_grad> = 3, <dir, prev_grad> = -2
"""

import jax.numpy as jnp
import pytest

from riemcg.geometry import ManifoldInnerProduct
from riemcg.manifolds import Euclidean
from riemcg.optimizers import CGScheme, ConjugacyTerms, ParameterValidationError
from riemcg.optimizers.schemes import (
    conjugate_descent,
    dai_yuan,
    fletcher_reeves,
    hestenes_stiefel,
    polak_ribiere,
)

PLANE = Euclidean(2)


def plane_inner():
    return ManifoldInnerProduct(PLANE, jnp.zeros(2))


class ScaledInnerProduct:
    """Inner product scaled by a constant factor."""

    def __init__(self, factor):
        self.factor = factor

    def __call__(self, u, v):
        return self.factor * float(jnp.sum(u * v))

    def norm2(self, v):
        return self(v, v)


def make_terms(transport=lambda v: v, prev_inner=None):
    return ConjugacyTerms(
        inner=plane_inner(),
        prev_inner=plane_inner() if prev_inner is None else prev_inner,
        grad=jnp.array([1.0, 2.0]),
        prev_grad=jnp.array([2.0, 0.0]),
        transported_velocity=jnp.array([-1.0, 1.0]),
        transport=transport,
    )


@pytest.mark.parametrize(
    "fn, expected",
    [
        (fletcher_reeves, 5.0 / 4.0),
        (polak_ribiere, 3.0 / 4.0),
        (hestenes_stiefel, 1.0),
        (conjugate_descent, 5.0 / 2.0),
        (dai_yuan, 5.0 / 3.0),
    ],
)
def test_coefficient_values(fn, expected):
    assert fn(make_terms()) == pytest.approx(expected)


@pytest.mark.parametrize(
    "scheme, fn",
    [
        (CGScheme.FLETCHER_REEVES, fletcher_reeves),
        (CGScheme.POLAK_RIBIERE, polak_ribiere),
        (CGScheme.HESTENES_STIEFEL, hestenes_stiefel),
        (CGScheme.CONJUGATE_DESCENT, conjugate_descent),
        (CGScheme.DAI_YUAN, dai_yuan),
    ],
)
def test_enum_dispatches_to_formula(scheme, fn):
    terms = make_terms()
    assert scheme.coefficient(terms) == pytest.approx(fn(terms))
    assert isinstance(scheme.coefficient(terms), float)


def test_previous_gradient_is_transported():
    # Doubling transport: T(prev_grad) = (4, 0), grad - T(prev_grad) = (-3, 2)
    terms = make_terms(transport=lambda v: 2.0 * v)
    assert polak_ribiere(terms) == pytest.approx(1.0 / 16.0)
    assert hestenes_stiefel(terms) == pytest.approx(1.0 / 5.0)
    assert conjugate_descent(terms) == pytest.approx(5.0 / 4.0)
    assert dai_yuan(terms) == pytest.approx(1.0)


def test_fletcher_reeves_uses_previous_metric_without_transport():
    calls = []

    def transport(v):
        calls.append(v)
        return 2.0 * v

    terms = make_terms(transport=transport, prev_inner=ScaledInnerProduct(2.0))
    assert fletcher_reeves(terms) == pytest.approx(5.0 / 8.0)
    assert calls == []


def test_transport_is_computed_once():
    calls = []

    def transport(v):
        calls.append(v)
        return v

    terms = make_terms(transport=transport)
    polak_ribiere(terms)
    hestenes_stiefel(terms)
    dai_yuan(terms)
    conjugate_descent(terms)
    assert len(calls) == 1


def test_zero_denominator_gives_nan():
    terms = ConjugacyTerms(
        inner=plane_inner(),
        prev_inner=plane_inner(),
        grad=jnp.array([1.0, 0.0]),
        prev_grad=jnp.array([1.0, 0.0]),
        transported_velocity=jnp.array([-1.0, 0.0]),
        transport=lambda v: v,
    )
    # grad - T(prev_grad) = 0: Hestenes-Stiefel is 0/0 and Dai-Yuan is 1/0
    assert jnp.isnan(CGScheme.HESTENES_STIEFEL.coefficient(terms))
    assert jnp.isnan(CGScheme.DAI_YUAN.coefficient(terms))
    assert CGScheme.POLAK_RIBIERE.coefficient(terms) == 0.0
    assert CGScheme.FLETCHER_REEVES.coefficient(terms) == 1.0


class TestFromValue:
    """Test scheme lookup by name."""

    @pytest.mark.parametrize("scheme", list(CGScheme))
    def test_member_and_value(self, scheme):
        assert CGScheme.from_value(scheme) is scheme
        assert CGScheme.from_value(scheme.value) is scheme
        assert CGScheme.from_value(scheme.name) is scheme

    @pytest.mark.parametrize(
        "alias, expected",
        [
            ("fr", CGScheme.FLETCHER_REEVES),
            ("PR", CGScheme.POLAK_RIBIERE),
            ("prp", CGScheme.POLAK_RIBIERE),
            ("hs", CGScheme.HESTENES_STIEFEL),
            ("CD", CGScheme.CONJUGATE_DESCENT),
            ("dy", CGScheme.DAI_YUAN),
            ("Fletcher-Reeves", CGScheme.FLETCHER_REEVES),
            ("dai yuan", CGScheme.DAI_YUAN),
        ],
    )
    def test_aliases(self, alias, expected):
        assert CGScheme.from_value(alias) is expected

    @pytest.mark.parametrize("value", ["newton", "", 3, None])
    def test_unknown_scheme(self, value):
        with pytest.raises(ParameterValidationError) as exc_info:
            CGScheme.from_value(value)
        assert exc_info.value.parameter_name == "scheme"
        assert isinstance(exc_info.value, ValueError)
