"""Rendering-side collaborators: camera, debug gizmos, headless image output."""

from offaxis.rendering.camera import Camera
from offaxis.rendering.gizmos import (
    GizmoCollector,
    GizmoFrame,
    GizmoLabel,
    GizmoLine,
    GizmoRenderer,
    average_view_direction,
    build_camera_gizmos,
    build_plane_gizmos,
)
from offaxis.rendering.image_renderer import ImageGizmoRenderer

__all__ = [
    "Camera",
    "GizmoCollector",
    "GizmoFrame",
    "GizmoLabel",
    "GizmoLine",
    "GizmoRenderer",
    "ImageGizmoRenderer",
    "average_view_direction",
    "build_camera_gizmos",
    "build_plane_gizmos",
]
