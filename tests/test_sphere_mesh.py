import numpy as np
import pytest

from probulator.sphere_mesh import (
    Mesh,
    Vertex,
    compute_vertex_normals,
    generate_sphere,
    mesh_bounds,
)


@pytest.mark.parametrize("u_slices, v_slices", [(4, 2), (8, 6), (16, 12), (3, 5)])
def test_sphere_counts(u_slices, v_slices):
    mesh = generate_sphere(u_slices, v_slices)
    assert len(mesh.vertices) == 2 + u_slices * (v_slices - 1)
    assert len(mesh.indices) == 6 * u_slices * (v_slices - 1)


def test_sphere_indices_in_range_and_all_used():
    mesh = generate_sphere(12, 9)
    indices = np.array(mesh.indices)
    assert indices.min() == 0
    assert indices.max() == len(mesh.vertices) - 1
    assert set(indices.tolist()) == set(range(len(mesh.vertices)))


def test_sphere_triangles_are_not_degenerate():
    mesh = generate_sphere(10, 7)
    for tri in mesh.triangles:
        assert len(set(tri.tolist())) == 3


def test_sphere_vertices_on_unit_sphere_with_matching_normals():
    mesh = generate_sphere(10, 8)
    positions = mesh.positions
    np.testing.assert_allclose(np.linalg.norm(positions, axis=1), 1.0, atol=1e-12)
    for vertex in mesh.vertices:
        np.testing.assert_allclose(vertex.normal, vertex.position)


def test_sphere_poles_and_bounds():
    mesh = generate_sphere(6, 4)
    np.testing.assert_allclose(mesh.vertices[0].position, [0.0, 0.0, 1.0])
    np.testing.assert_allclose(mesh.vertices[-1].position, [0.0, 0.0, -1.0])
    np.testing.assert_allclose(mesh.bounds_min, [-1.0, -1.0, -1.0])
    np.testing.assert_allclose(mesh.bounds_max, [1.0, 1.0, 1.0])
    np.testing.assert_allclose(mesh.dimensions, [2.0, 2.0, 2.0])
    np.testing.assert_allclose(mesh.center, [0.0, 0.0, 0.0])


def test_sphere_positions_inside_declared_bounds():
    mesh = generate_sphere(9, 5)
    lo, hi = mesh_bounds(mesh.positions)
    # The poles reach the declared bounds along z exactly.
    assert lo[2] == pytest.approx(-1.0)
    assert hi[2] == pytest.approx(1.0)
    assert lo.min() >= -1.0 - 1e-12
    assert hi.max() <= 1.0 + 1e-12
    assert np.all(lo >= mesh.bounds_min - 1e-12)
    assert np.all(hi <= mesh.bounds_max + 1e-12)


def test_sphere_default_sizes():
    mesh = generate_sphere()
    assert len(mesh.vertices) == 2 + 256 * 191


@pytest.mark.parametrize("u_slices, v_slices", [(0, 4), (4, 1), (4, 0)])
def test_sphere_rejects_bad_slice_counts(u_slices, v_slices):
    with pytest.raises(ValueError):
        generate_sphere(u_slices, v_slices)


def test_normals_single_triangle():
    positions = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)]
    normals = compute_vertex_normals(positions, [0, 1, 2])
    np.testing.assert_allclose(normals, [[0.0, 0.0, 1.0]] * 3, atol=1e-12)


def test_normals_flip_with_winding():
    positions = np.array([(0.0, 0.0, 0.0), (2.0, 0.0, 1.0), (0.0, 3.0, 0.5)])
    forward = compute_vertex_normals(positions, [0, 1, 2])
    backward = compute_vertex_normals(positions, [0, 2, 1])
    np.testing.assert_allclose(forward, -backward, atol=1e-12)


def test_normals_are_unit_length_for_sphere_mesh():
    mesh = generate_sphere(8, 6)
    normals = compute_vertex_normals(mesh.positions, mesh.indices)
    np.testing.assert_allclose(np.linalg.norm(normals, axis=1), 1.0, atol=1e-9)


def test_shared_vertex_normal_is_average_direction():
    positions = [
        (0.0, 0.0, 0.0),
        (1.0, 0.0, 0.0),
        (0.0, 1.0, 0.0),
        (0.0, 0.0, 1.0),
    ]
    # Two faces sharing edge 0-1: one in the XY plane, one in the XZ plane.
    normals = compute_vertex_normals(positions, [0, 1, 2, 0, 3, 1])
    face_a = compute_vertex_normals(positions, [0, 1, 2])[0]
    face_b = compute_vertex_normals(positions, [0, 3, 1])[0]
    expected = (face_a + face_b) / np.linalg.norm(face_a + face_b)
    np.testing.assert_allclose(normals[0], expected, atol=1e-12)
    np.testing.assert_allclose(normals[1], expected, atol=1e-12)


def test_unreferenced_vertex_has_zero_normal():
    positions = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (5.0, 5.0, 5.0)]
    normals = compute_vertex_normals(positions, [0, 1, 2])
    np.testing.assert_array_equal(normals[3], [0.0, 0.0, 0.0])


def test_normals_reject_out_of_range_index():
    with pytest.raises(IndexError):
        compute_vertex_normals([(0.0, 0.0, 0.0)] * 3, [0, 1, 3])


def test_mesh_bounds():
    lo, hi = mesh_bounds([(1.0, -2.0, 3.0), (-4.0, 5.0, 0.0), (2.0, 0.0, -6.0)])
    np.testing.assert_array_equal(lo, [-4.0, -2.0, -6.0])
    np.testing.assert_array_equal(hi, [2.0, 5.0, 3.0])


def test_mesh_bounds_empty_raises():
    with pytest.raises(ValueError):
        mesh_bounds([])


def test_mesh_dimensions_and_center_from_bounds():
    lo, hi = mesh_bounds([(1.0, 1.0, 1.0), (3.0, 5.0, 9.0)])
    mesh = Mesh(vertices=[Vertex(position=(1, 1, 1)), Vertex(position=(3, 5, 9))], bounds_min=lo, bounds_max=hi)
    np.testing.assert_array_equal(mesh.dimensions, hi - lo)
    np.testing.assert_array_equal(mesh.center, (hi + lo) / 2.0)
    np.testing.assert_array_equal(mesh.positions, [[1.0, 1.0, 1.0], [3.0, 5.0, 9.0]])