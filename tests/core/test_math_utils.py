"""Tests for math_utils module."""

import numpy as np
import pytest

from offaxis.core.math_utils import (
    as_quat, as_vec3, vec3, mat4_identity, mat4_translation,
    mat4_from_quaternion, mat4_compose, mat4_frustum, mat4_perspective,
    mat4_look_at, mat4_inverse,
    quat_identity, quat_from_euler, quat_from_axis_angle,
    quat_multiply, quat_conjugate, quat_inverse, quat_normalize,
    normalize, deg_to_rad, transform_point,
    world_to_screen,
)


def test_vec3():
    v = vec3(1, 2, 3)
    assert v.shape == (3,)
    np.testing.assert_array_equal(v, [1, 2, 3])


def test_as_vec3_rejects_wrong_shape():
    with pytest.raises(ValueError):
        as_vec3([1, 2])
    with pytest.raises(ValueError):
        as_quat([0, 0, 1])


def test_as_vec3_copies():
    src = np.array([1.0, 2.0, 3.0])
    v = as_vec3(src)
    src[0] = 10.0
    assert v[0] == 1.0


def test_mat4_translation():
    m = mat4_translation(1, 2, 3)
    p = transform_point(m, vec3(0, 0, 0))
    np.testing.assert_array_almost_equal(p, [1, 2, 3])


def test_quat_from_axis_angle():
    q = quat_from_axis_angle(vec3(0, 1, 0), np.pi / 2)
    v = transform_point(mat4_from_quaternion(q), vec3(1, 0, 0))
    np.testing.assert_array_almost_equal(v, [0, 0, -1], decimal=10)


def test_quat_multiply_identity():
    q = quat_from_euler(0.3, 0.5, 0.7)
    result = quat_multiply(q, quat_identity())
    np.testing.assert_array_almost_equal(result, q)


def test_quat_conjugate():
    q = quat_from_euler(0.3, 0.5, 0.7)
    qc = quat_conjugate(q)
    result = quat_multiply(q, qc)
    np.testing.assert_array_almost_equal(result, [0, 0, 0, 1], decimal=10)


def test_quat_inverse_non_unit():
    q = quat_from_euler(0.2, -0.4, 0.1) * 3.0
    result = quat_multiply(q, quat_inverse(q))
    np.testing.assert_array_almost_equal(result, [0, 0, 0, 1], decimal=10)


def test_quat_normalize():
    q = np.array([1.0, 1.0, 1.0, 1.0])
    qn = quat_normalize(q)
    assert abs(np.linalg.norm(qn) - 1.0) < 1e-10


def test_quat_from_euler_unsupported_order():
    with pytest.raises(ValueError):
        quat_from_euler(0.1, 0.2, 0.3, order="YZX")


def test_mat4_from_quaternion_is_orthonormal():
    q = quat_from_euler(0.4, -0.3, 1.1)
    r = mat4_from_quaternion(q)[:3, :3]
    np.testing.assert_array_almost_equal(r @ r.T, np.eye(3), decimal=10)
    assert np.linalg.det(r) == pytest.approx(1.0)


def test_mat4_compose():
    pos = vec3(1, 2, 3)
    q = quat_identity()
    scale = vec3(2, 2, 2)
    m = mat4_compose(pos, q, scale)
    p = transform_point(m, vec3(1, 0, 0))
    np.testing.assert_array_almost_equal(p, [3, 2, 3])


def test_mat4_compose_non_uniform_scale_applies_before_rotation():
    # 90 degrees about Z: local X maps to world Y
    q = quat_from_axis_angle(vec3(0, 0, 1), np.pi / 2)
    m = mat4_compose(vec3(0, 0, 0), q, vec3(3, 1, 1))
    p = transform_point(m, vec3(1, 0, 0))
    np.testing.assert_array_almost_equal(p, [0, 3, 0], decimal=10)


def test_mat4_inverse():
    m = mat4_translation(5, 10, 15)
    mi = mat4_inverse(m)
    result = m @ mi
    np.testing.assert_array_almost_equal(result, np.eye(4), decimal=10)


def test_normalize():
    v = normalize(vec3(3, 0, 0))
    np.testing.assert_array_almost_equal(v, [1, 0, 0])


def test_normalize_zero():
    v = normalize(vec3(0, 0, 0))
    np.testing.assert_array_equal(v, [0, 0, 0])


def test_mat4_look_at():
    eye = vec3(0, 0, 5)
    m = mat4_look_at(eye, vec3(0, 0, 0), vec3(0, 1, 0))
    p = transform_point(m, eye)
    np.testing.assert_array_almost_equal(p, [0, 0, 0], decimal=10)


def test_mat4_perspective():
    m = mat4_perspective(deg_to_rad(60), 1.0, 0.1, 100.0)
    assert m[0, 0] != 0
    assert m[1, 1] != 0
    assert m[3, 2] == -1.0


def test_mat4_frustum_symmetric_matches_perspective():
    near, far = 0.1, 100.0
    fov = deg_to_rad(60)
    aspect = 1.5
    top = near * np.tan(fov / 2)
    right = top * aspect
    f = mat4_frustum(-right, right, -top, top, near, far)
    p = mat4_perspective(fov, aspect, near, far)
    np.testing.assert_array_almost_equal(f, p, decimal=10)


def test_mat4_frustum_maps_window_to_ndc():
    left, right, bottom, top, near, far = -0.3, 0.1, -0.05, 0.2, 0.5, 50.0
    m = mat4_frustum(left, right, bottom, top, near, far)
    for x, y, ndc in [(left, bottom, (-1, -1)), (right, top, (1, 1)), (left, top, (-1, 1))]:
        clip = m @ np.array([x, y, -near, 1.0])
        np.testing.assert_array_almost_equal(clip[:2] / clip[3], ndc, decimal=10)
        assert clip[2] / clip[3] == pytest.approx(-1.0)
    clip = m @ np.array([0.0, 0.0, -far, 1.0])
    assert clip[2] / clip[3] == pytest.approx(1.0)


def test_world_to_screen_center_and_behind():
    vp = mat4_perspective(deg_to_rad(90), 1.0, 0.1, 100.0) @ mat4_look_at(
        vec3(0, 0, 5), vec3(0, 0, 0), vec3(0, 1, 0))
    x, y, in_front = world_to_screen(vec3(0, 0, 0), vp, 200, 100)
    assert in_front
    assert x == pytest.approx(100.0)
    assert y == pytest.approx(50.0)
    _, _, in_front = world_to_screen(vec3(0, 0, 10), vp, 200, 100)
    assert not in_front
