"""Unit tests for the Lambertian material.

Tests cover:
- Scattered direction lies in the normal's hemisphere
- Attenuation equals the albedo
- Stream state advances
"""

import numpy as np
import pytest
import taichi as ti

N = 2048


def _scatter_many(normal):
    from mcray.core.rng import stream_seed
    from mcray.materials.lambertian import scatter_lambertian, vec3

    directions = ti.Vector.field(3, dtype=ti.f32, shape=N)
    attenuation = ti.Vector.field(3, dtype=ti.f32, shape=())
    states = ti.field(dtype=ti.u32, shape=2)

    @ti.kernel
    def test_kernel(n: vec3):
        for _ in range(1):
            state = stream_seed(ti.u32(11), ti.u32(0))
            states[0] = state
            for k in range(N):
                state, direction, atten = scatter_lambertian(vec3(0.3, 0.5, 0.7), n, state)
                directions[k] = direction
                attenuation[None] = atten
            states[1] = state

    test_kernel(vec3(*normal))
    return directions.to_numpy(), attenuation[None], states.to_numpy()


class TestScatterLambertian:
    """Tests for scatter_lambertian."""

    def test_directions_in_normal_hemisphere(self):
        directions, _, _ = _scatter_many((0.0, 1.0, 0.0))
        assert np.all(directions[:, 1] >= -1e-6)

    def test_directions_centered_on_normal(self):
        normal = np.array([0.0, 0.0, 1.0])
        directions, _, _ = _scatter_many(tuple(normal))
        # normal + unit vector has mean equal to the normal
        np.testing.assert_allclose(directions.mean(axis=0), normal, atol=0.05)

    def test_attenuation_is_albedo(self):
        _, attenuation, _ = _scatter_many((0.0, 1.0, 0.0))
        assert (attenuation[0], attenuation[1], attenuation[2]) == pytest.approx((0.3, 0.5, 0.7))

    def test_state_advances(self):
        _, _, states = _scatter_many((0.0, 1.0, 0.0))
        assert states[0] != states[1]
