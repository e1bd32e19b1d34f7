"""Property-based testing for geodesics and parallel transport using Hypothesis.

Property tests cover:
- Geodesics stay on the manifold
- Transport along a geodesic keeps vectors tangent and preserves inner products
- The transported initial velocity is the curve's velocity
"""

import jax.numpy as jnp
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from riemcg.manifolds.spd import SymmetricPositiveDefinite
from riemcg.manifolds.sphere import Sphere

finite_floats = st.floats(min_value=-5.0, max_value=5.0, allow_nan=False, allow_infinity=False)


@st.composite
def sphere_geodesic_data(draw, n=3):
    """Generate a point on S^n, a velocity and two tangent vectors at the point."""
    coords = jnp.array(draw(st.lists(finite_floats, min_size=n + 1, max_size=n + 1)))
    norm = jnp.linalg.norm(coords)
    assume(norm > 1e-3)
    x = coords / norm

    sphere = Sphere(n)
    vectors = []
    for _ in range(3):
        v = jnp.array(draw(st.lists(finite_floats, min_size=n + 1, max_size=n + 1)))
        vectors.append(sphere.proj(x, v))
    t = draw(st.floats(min_value=-3.0, max_value=3.0, allow_nan=False))
    return x, vectors[0], vectors[1], vectors[2], t


@st.composite
def spd_geodesic_data(draw, n=2):
    """Generate an SPD matrix, a symmetric velocity and two symmetric tangent vectors."""

    def symmetric():
        m = jnp.array(draw(st.lists(finite_floats, min_size=n * n, max_size=n * n))).reshape(n, n)
        return 0.5 * (m + m.T)

    base = jnp.array(draw(st.lists(finite_floats, min_size=n * n, max_size=n * n))).reshape(n, n)
    x = base @ base.T + jnp.eye(n)
    velocity = 0.2 * symmetric()
    t = draw(st.floats(min_value=-1.0, max_value=1.0, allow_nan=False))
    return x, velocity, symmetric(), symmetric(), t


class TestSphereTransportProperties:
    """Parallel transport along great circles."""

    @given(sphere_geodesic_data())
    @settings(max_examples=30, deadline=None)
    def test_geodesic_stays_on_sphere(self, data):
        x, v, _, _, t = data
        sphere = Sphere(3)
        assert sphere.validate_point(sphere.geodesic(x, v, t))

    @given(sphere_geodesic_data())
    @settings(max_examples=30, deadline=None)
    def test_transport_is_isometry(self, data):
        x, v, u, w, t = data
        sphere = Sphere(3)
        y = sphere.geodesic(x, v, t)
        pu = sphere.transp_along(x, v, t, u)
        pw = sphere.transp_along(x, v, t, w)
        assert jnp.allclose(jnp.dot(pu, y), 0.0, atol=1e-8)
        assert jnp.allclose(sphere.inner(y, pu, pw), sphere.inner(x, u, w), atol=1e-8)

    @given(sphere_geodesic_data())
    @settings(max_examples=30, deadline=None)
    def test_transported_velocity_is_curve_velocity(self, data):
        x, v, _, _, t = data
        sphere = Sphere(3)
        h = 1e-6
        derivative = (sphere.geodesic(x, v, t + h) - sphere.geodesic(x, v, t - h)) / (2 * h)
        assert jnp.allclose(sphere.transp_along(x, v, t, v), derivative, atol=1e-5)


class TestSPDTransportProperties:
    """Parallel transport along affine-invariant geodesics."""

    @given(spd_geodesic_data())
    @settings(max_examples=20, deadline=None)
    def test_geodesic_stays_on_manifold(self, data):
        x, v, _, _, t = data
        spd = SymmetricPositiveDefinite(2)
        assert spd.validate_point(spd.geodesic(x, v, t), atol=1e-10)

    @given(spd_geodesic_data())
    @settings(max_examples=20, deadline=None)
    def test_transport_is_isometry(self, data):
        x, v, u, w, t = data
        spd = SymmetricPositiveDefinite(2)
        y = spd.geodesic(x, v, t)
        pu = spd.transp_along(x, v, t, u)
        pw = spd.transp_along(x, v, t, w)
        expected = spd.inner(x, u, w)
        assert jnp.allclose(spd.inner(y, pu, pw), expected, rtol=1e-6, atol=1e-8)
