"""Tests for the integrator: background, bounce loop and render kernels.

Tests cover:
- Background gradient values
- Bounce budget (depth 0 and exhausted paths are black)
- Material bounces through trace_ray
- Render target setup and image orientation
- Determinism and batch independence
- Degenerate geometry detection
"""

import numpy as np
import pytest


def _camera(size=9):
    from mcray.camera.pinhole import PinholeCamera

    return PinholeCamera(
        eye=(0.0, 0.0, 0.0),
        look_at=(0.0, 0.0, -1.0),
        up=(0.0, 1.0, 0.0),
        vfov=90.0,
        width=size,
        height=size,
    )


def _render(samples, batch=None, seed=1, size=9, max_depth=50):
    from mcray.camera.pinhole import setup_camera
    from mcray.core.integrator import get_image_numpy, render_samples, setup_render_target

    setup_camera(_camera(size))
    setup_render_target(size, size, seed)
    batch = batch or samples
    done = 0
    while done < samples:
        count = min(batch, samples - done)
        render_samples(count, 1.0 / samples, max_depth)
        done += count
    return get_image_numpy()


class TestBackground:
    """Tests for the sky gradient seen by escaping rays."""

    def test_straight_up_is_sky_blue(self):
        from mcray.core.integrator import trace_ray

        color = trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        assert color == (0.5, float(np.float32(0.7)), 1.0)

    def test_straight_down_is_white(self):
        from mcray.core.integrator import trace_ray

        color = trace_ray((0.0, 0.0, 0.0), (0.0, -1.0, 0.0))
        assert color == (1.0, 1.0, 1.0)

    def test_horizontal_is_halfway(self):
        from mcray.core.integrator import trace_ray

        color = trace_ray((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
        assert color == pytest.approx((0.75, 0.85, 1.0), abs=1e-6)

    def test_direction_is_normalized_first(self):
        from mcray.core.integrator import trace_ray

        assert trace_ray((0.0, 0.0, 0.0), (0.0, 7.0, 0.0)) == trace_ray(
            (0.0, 0.0, 0.0), (0.0, 1.0, 0.0)
        )


class TestBounceBudget:
    """Tests for max_depth handling."""

    def test_depth_zero_is_black(self):
        from mcray.core.integrator import trace_ray

        assert trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), max_depth=0) == (0.0, 0.0, 0.0)

    def test_exhausted_budget_is_black(self):
        from mcray.core.integrator import trace_ray
        from mcray.scene.manager import Scene

        scene = Scene()
        scene.add_lambertian_sphere((0.0, 0.0, 0.0), 1.0, (0.5, 0.5, 0.5))
        assert trace_ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), max_depth=1) == (0.0, 0.0, 0.0)

    def test_miss_with_budget_one_sees_background(self):
        from mcray.core.integrator import trace_ray

        assert trace_ray((0.0, 0.0, 0.0), (0.0, -1.0, 0.0), max_depth=1) == (1.0, 1.0, 1.0)


class TestMaterialBounces:
    """Tests for single paths through one sphere."""

    def test_mirror_tints_reflected_sky(self):
        from mcray.core.integrator import trace_ray
        from mcray.scene.manager import Scene

        scene = Scene()
        scene.add_metal_sphere((0.0, 0.0, 0.0), 1.0, (0.8, 0.6, 0.2), 0.0)
        color = trace_ray((0.0, 5.0, 0.0), (0.0, -1.0, 0.0))
        assert color == pytest.approx((0.4, 0.42, 0.2), abs=1e-6)

    def test_lambertian_darkens_by_albedo(self):
        from mcray.core.integrator import trace_ray
        from mcray.scene.manager import Scene

        scene = Scene()
        scene.add_lambertian_sphere((0.0, 0.0, 0.0), 1.0, (0.5, 0.5, 0.5))
        for seed in range(8):
            color = trace_ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), seed=seed)
            assert all(0.0 <= c <= 0.5 for c in color)

    def test_zero_radius_sphere_is_degenerate(self):
        from mcray.core.integrator import trace_ray
        from mcray.errors import DegenerateGeometryError
        from mcray.scene.manager import Scene

        scene = Scene()
        scene.add_lambertian_sphere((0.0, 0.0, 0.0), 0.0, (0.5, 0.5, 0.5))
        with pytest.raises(DegenerateGeometryError):
            trace_ray((0.0, 0.0, 5.0), (0.0, 0.0, -1.0))

    def test_zero_direction_is_degenerate(self):
        from mcray.core.integrator import trace_ray
        from mcray.errors import DegenerateGeometryError

        with pytest.raises(DegenerateGeometryError):
            trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))


class TestRenderTarget:
    """Tests for render target setup."""

    def test_rejects_oversized_dimensions(self):
        from mcray.core.integrator import MAX_IMAGE_WIDTH, setup_render_target

        with pytest.raises(ValueError, match="exceed"):
            setup_render_target(MAX_IMAGE_WIDTH + 1, 10)

    def test_rejects_empty_dimensions(self):
        from mcray.core.integrator import setup_render_target

        with pytest.raises(ValueError, match="positive"):
            setup_render_target(0, 10)

    def test_setup_clears_buffer(self):
        from mcray.core.integrator import (
            get_image_numpy,
            get_total_samples,
            setup_render_target,
        )

        image = _render(2)
        assert image.max() > 0.0
        setup_render_target(9, 9, 1)
        assert get_total_samples() == 0
        assert get_image_numpy().max() == 0.0

    def test_render_requires_camera(self):
        from mcray.camera.pinhole import reset_camera
        from mcray.core.integrator import render_samples, setup_render_target

        setup_render_target(4, 4, 0)
        reset_camera()
        with pytest.raises(RuntimeError, match="Camera"):
            render_samples(1, 1.0)

    def test_negative_count_rejected(self):
        from mcray.camera.pinhole import setup_camera
        from mcray.core.integrator import render_samples, setup_render_target

        setup_camera(_camera(4))
        setup_render_target(4, 4, 0)
        with pytest.raises(ValueError, match="negative"):
            render_samples(-1, 1.0)

    def test_degenerate_render_clears_target(self):
        from mcray.camera.pinhole import setup_camera
        from mcray.core.integrator import (
            get_image_numpy,
            get_total_samples,
            render_samples,
            setup_render_target,
        )
        from mcray.errors import DegenerateGeometryError
        from mcray.scene.manager import Scene

        scene = Scene()
        setup_camera(_camera(4))
        setup_render_target(4, 4, 0)
        render_samples(2, 0.5)
        assert get_total_samples() == 2

        # Every primary ray starts at the centre of this sphere
        scene.add_lambertian_sphere((0.0, 0.0, 0.0), 0.0, (0.5, 0.5, 0.5))
        with pytest.raises(DegenerateGeometryError):
            render_samples(1, 0.5)
        assert get_total_samples() == 0
        assert get_image_numpy().max() == 0.0


class TestRendering:
    """End-to-end tests of render_samples."""

    def test_empty_scene_shows_gradient(self):
        image = _render(4)
        assert image.shape == (9, 9, 3)
        assert image.dtype == np.float32
        # Sky is bluer toward the top of the image (row 0)
        assert image[0, 4, 0] < image[8, 4, 0]
        np.testing.assert_allclose(image[:, :, 2], 1.0, atol=1e-5)

    def test_center_pixel_sees_sphere(self):
        from mcray.scene.manager import Scene

        scene = Scene()
        scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, (0.5, 0.5, 0.5))
        image = _render(16)
        center = image[4, 4]
        assert np.all(center >= 0.0)
        assert np.all(center <= 0.5 + 1e-6)
        assert center.max() > 0.0
        # Background in that direction would be (0.75, 0.85, 1)
        assert center[0] < 0.75

    def test_row_zero_is_top_of_scene(self):
        from mcray.scene.manager import Scene

        scene = Scene()
        # Black sphere above the view axis
        scene.add_lambertian_sphere((0.0, 0.5, -1.0), 0.3, (0.0, 0.0, 0.0))
        image = _render(4)
        assert np.all(image[2, 4] == 0.0)
        assert np.all(image[6, 4] > 0.0)

    def test_same_seed_is_deterministic(self):
        from mcray.scene.manager import Scene

        scene = Scene()
        scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, (0.5, 0.5, 0.5))
        scene.add_dielectric_sphere((0.6, 0.0, -1.2), 0.3)
        a = _render(4, seed=3)
        b = _render(4, seed=3)
        np.testing.assert_array_equal(a, b)

    def test_batching_does_not_change_result(self):
        from mcray.scene.manager import Scene

        scene = Scene()
        scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, (0.5, 0.5, 0.5))
        scene.add_metal_sphere((0.6, 0.0, -1.2), 0.3, (0.8, 0.8, 0.8), 0.4)
        whole = _render(6, seed=5)
        batched = _render(6, batch=1, seed=5)
        np.testing.assert_array_equal(whole, batched)

    def test_different_seeds_differ(self):
        from mcray.scene.manager import Scene

        scene = Scene()
        scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, (0.5, 0.5, 0.5))
        a = _render(2, seed=1)
        b = _render(2, seed=2)
        assert not np.array_equal(a, b)

    def test_no_nan_or_out_of_range_values(self):
        from mcray.scene.presets import create_showcase_scene

        create_showcase_scene(9, 9)
        image = _render(4)
        assert not np.any(np.isnan(image))
        assert image.min() >= 0.0
        assert image.max() <= 1.0 + 1e-5

    def test_sample_count_tracks_renders(self):
        from mcray.core.integrator import get_total_samples, render_samples

        _render(3)
        assert get_total_samples() == 3
        render_samples(2, 1.0 / 3)
        assert get_total_samples() == 5

    def test_single_sample_depth_one_center_pixel(self):
        """One sample, one bounce: the sphere hit is visible and not brightened."""
        from mcray.output.tonemap import gamma_correct
        from mcray.scene.manager import Scene

        scene = Scene()
        scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, (0.5, 0.5, 0.5))
        image = gamma_correct(_render(1, max_depth=1))
        background = gamma_correct(np.array([0.75, 0.85, 1.0]))

        center = image[4, 4]
        assert np.all(center >= 0.0)
        assert np.all(center <= 0.5)
        assert not np.allclose(center, background, atol=0.1)
