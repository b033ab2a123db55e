"""Debug gizmos for the projection plane and camera.

Gizmos are plain line/label records built from core results.  A
``GizmoCollector`` listens on the event bus and hands a fresh frame to
whatever ``GizmoRenderer`` is attached; nothing here writes back into the
projection core.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

import numpy as np

from offaxis.constants import (
    GIZMO_CORNER_RAY_COLOR,
    GIZMO_PLANE_COLOR,
    GIZMO_RIGHT_COLOR,
    GIZMO_UP_COLOR,
    GIZMO_VIEW_DIR_COLOR,
)
from offaxis.core.events import EventBus, EventType
from offaxis.core.math_utils import Vec3
from offaxis.projection.off_axis import ProjectionResult
from offaxis.projection.plane_surface import PlaneSurfaceResult

Color = tuple[int, int, int]


@dataclass(frozen=True, eq=False)
class GizmoLine:
    start: Vec3
    end: Vec3
    color: Color


@dataclass(frozen=True, eq=False)
class GizmoLabel:
    position: Vec3
    text: str


@dataclass
class GizmoFrame:
    """Everything to draw for one frame."""
    lines: list[GizmoLine] = field(default_factory=list)
    labels: list[GizmoLabel] = field(default_factory=list)

    def extend(self, other: "GizmoFrame") -> "GizmoFrame":
        self.lines.extend(other.lines)
        self.labels.extend(other.labels)
        return self


class GizmoRenderer(Protocol):
    def draw(self, frame: GizmoFrame) -> None: ...


def build_plane_gizmos(plane: PlaneSurfaceResult) -> GizmoFrame:
    """Rectangle outline, basis axes and their labels."""
    c = plane.corners
    center = plane.center
    axis_len = float(np.hypot(*plane.size)) / 4.0

    normal_end = center + plane.basis.normal * axis_len
    up_end = center + plane.basis.up * axis_len
    right_end = center + plane.basis.right * axis_len

    lines = [
        GizmoLine(c.top_left, c.bottom_left, GIZMO_PLANE_COLOR),
        GizmoLine(c.top_left, c.top_right, GIZMO_PLANE_COLOR),
        GizmoLine(c.top_right, c.bottom_right, GIZMO_PLANE_COLOR),
        GizmoLine(c.bottom_left, c.bottom_right, GIZMO_PLANE_COLOR),
        GizmoLine(center, normal_end, GIZMO_PLANE_COLOR),
        GizmoLine(center, up_end, GIZMO_UP_COLOR),
        GizmoLine(center, right_end, GIZMO_RIGHT_COLOR),
    ]
    labels = [
        GizmoLabel(c.top_left, "Top Left"),
        GizmoLabel(c.top_right, "Top Right"),
        GizmoLabel(c.bottom_left, "Bottom Left"),
        GizmoLabel(c.bottom_right, "Bottom Right"),
        GizmoLabel(normal_end, "Normal"),
        GizmoLabel(up_end, "Up"),
        GizmoLabel(right_end, "Right"),
    ]
    return GizmoFrame(lines, labels)


def average_view_direction(projection: ProjectionResult) -> Optional[Vec3]:
    """Mean of the four camera-to-corner vectors, or None before any accept."""
    if projection.corner_vectors is None:
        return None
    return projection.corner_vectors.as_array().mean(axis=0)


def build_camera_gizmos(projection: ProjectionResult) -> GizmoFrame:
    """Rays from the camera to each corner plus the averaged view direction."""
    view_dir = average_view_direction(projection)
    if view_dir is None:
        return GizmoFrame()

    pos = np.asarray(projection.accepted_position)
    lines = [
        GizmoLine(pos, pos + v, GIZMO_CORNER_RAY_COLOR)
        for v in projection.corner_vectors.as_array()
    ]
    lines.append(GizmoLine(pos, pos + view_dir, GIZMO_VIEW_DIR_COLOR))
    labels = [GizmoLabel(pos + view_dir / 2.0, "View Dir")]
    return GizmoFrame(lines, labels)


class GizmoCollector:
    """Builds gizmo frames from bus events and forwards them to a renderer."""

    def __init__(
        self,
        event_bus: EventBus,
        renderer: Optional[GizmoRenderer] = None,
        draw_plane: bool = True,
        draw_camera: bool = True,
    ) -> None:
        self.event_bus = event_bus
        self.renderer = renderer
        self.draw_plane = draw_plane
        self.draw_camera = draw_camera

        self._plane: Optional[PlaneSurfaceResult] = None
        self._projection: Optional[ProjectionResult] = None

        event_bus.subscribe(EventType.PLANE_RECOMPUTED, self._on_plane)
        event_bus.subscribe(EventType.PROJECTION_UPDATED, self._on_projection)
        event_bus.subscribe(EventType.PROJECTION_REJECTED, self._on_projection)

    def detach(self) -> None:
        self.event_bus.unsubscribe(EventType.PLANE_RECOMPUTED, self._on_plane)
        self.event_bus.unsubscribe(EventType.PROJECTION_UPDATED, self._on_projection)
        self.event_bus.unsubscribe(EventType.PROJECTION_REJECTED, self._on_projection)

    def _on_plane(self, result: PlaneSurfaceResult, **_) -> None:
        self._plane = result

    def _on_projection(self, result: ProjectionResult, **_) -> None:
        self._projection = result
        if self.renderer is not None:
            self.renderer.draw(self.frame())

    def frame(self) -> GizmoFrame:
        """Current gizmo frame from the latest plane and projection."""
        out = GizmoFrame()
        if self.draw_plane and self._plane is not None:
            out.extend(build_plane_gizmos(self._plane))
        if self.draw_camera and self._projection is not None:
            out.extend(build_camera_gizmos(self._projection))
        return out
