"""Unit tests for scene-level nearest-hit queries."""

import pytest
import taichi as ti


def _query(origin, direction, t_min=0.0):
    from mcray.core.ray import make_ray, vec3
    from mcray.scene.intersection import intersect_scene

    hit = ti.field(dtype=ti.i32, shape=())
    distance = ti.field(dtype=ti.f32, shape=())
    index = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, t_min: ti.f32):
        for _ in range(1):
            record = intersect_scene(make_ray(o, d, vec3(1.0, 1.0, 1.0)), t_min)
            hit[None] = record.hit
            distance[None] = record.distance
            index[None] = record.index

    test_kernel(vec3(*origin), vec3(*direction), t_min)
    return hit[None], distance[None], index[None]


class TestSphereStorage:
    """Tests for add_sphere / clear_scene."""

    def test_add_sphere_returns_indices(self):
        from mcray.scene.intersection import add_sphere, get_sphere_count

        assert add_sphere((0.0, 0.0, -1.0), 0.5) == 0
        assert add_sphere((1.0, 0.0, -1.0), 0.5) == 1
        assert get_sphere_count() == 2

    def test_clear_scene(self):
        from mcray.scene.intersection import add_sphere, clear_scene, get_sphere_count

        add_sphere((0.0, 0.0, -1.0), 0.5)
        clear_scene()
        assert get_sphere_count() == 0

    def test_capacity(self, monkeypatch):
        import mcray.scene.intersection as intersection

        monkeypatch.setattr(intersection, "MAX_SPHERES", 2)
        intersection.add_sphere((0.0, 0.0, 0.0), 1.0)
        intersection.add_sphere((0.0, 0.0, 0.0), 1.0)
        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            intersection.add_sphere((0.0, 0.0, 0.0), 1.0)


class TestIntersectScene:
    """Tests for intersect_scene."""

    def test_empty_scene_misses(self):
        hit, _, index = _query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0
        assert index == -1

    def test_nearest_sphere_wins(self):
        from mcray.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -10.0), 1.0)
        add_sphere((0.0, 0.0, -5.0), 1.0)
        hit, distance, index = _query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert index == 1
        assert distance == pytest.approx(4.0, abs=1e-5)

    def test_equal_distances_keep_first(self):
        from mcray.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -5.0), 1.0)
        add_sphere((0.0, 0.0, -5.0), 1.0)
        hit, _, index = _query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert index == 0

    def test_ray_leaving_sphere_does_not_rehit_it(self):
        from mcray.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 0.0), 1.0)
        hit, _, _ = _query((0.0, 0.0, 1.0), (0.0, 0.0, 1.0))
        assert hit == 0

    def test_t_min_skips_near_sphere(self):
        from mcray.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -2.0), 0.5)
        add_sphere((0.0, 0.0, -10.0), 1.0)
        hit, distance, index = _query((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_min=3.0)
        assert hit == 1
        assert index == 1
        assert distance == pytest.approx(9.0, abs=1e-5)
