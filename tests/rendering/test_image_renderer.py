"""Tests for the headless PIL gizmo renderer."""

import numpy as np

from offaxis.core.math_utils import deg_to_rad, mat4_look_at, mat4_perspective, vec3
from offaxis.rendering.gizmos import GizmoFrame, GizmoLabel, GizmoLine
from offaxis.rendering.image_renderer import ImageGizmoRenderer

BG = (30, 30, 40)


def _front_view(width=100, height=100):
    view = mat4_look_at(vec3(0, 0, 5), vec3(0, 0, 0), vec3(0, 1, 0))
    return mat4_perspective(deg_to_rad(60), width / height, 0.1, 100.0) @ view


def test_draws_visible_line():
    r = ImageGizmoRenderer(100, 100, _front_view())
    r.draw(GizmoFrame([GizmoLine(vec3(-1, 0, 0), vec3(1, 0, 0), (255, 0, 0))]))
    assert r.skipped_lines == 0
    column = [r.image.getpixel((50, y)) for y in range(47, 54)]
    assert (255, 0, 0) in column


def test_skips_line_behind_viewer():
    r = ImageGizmoRenderer(100, 100, _front_view())
    r.draw(GizmoFrame([GizmoLine(vec3(0, 0, 0), vec3(0, 0, 10), (255, 0, 0))]))
    assert r.skipped_lines == 1
    pixels = np.asarray(r.image)
    assert np.all(pixels == BG)


def test_labels_and_title_draw_something():
    r = ImageGizmoRenderer(100, 100, _front_view(), title="T")
    r.draw(GizmoFrame(labels=[GizmoLabel(vec3(0, 0, 0), "Up")]))
    pixels = np.asarray(r.image)
    assert np.any(pixels != BG)


def test_save(tmp_path):
    r = ImageGizmoRenderer(64, 48, _front_view(64, 48))
    r.draw(GizmoFrame())
    path = r.save(tmp_path / "sub" / "out.png")
    assert path.is_file()
