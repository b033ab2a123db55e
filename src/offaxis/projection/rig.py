"""Host loop adapter pairing a plane node with a projecting camera node.

``ProjectionRig.step`` is meant to be called once per rendered frame.  It
recomputes the plane only when the plane node's generation counters or
the configured size changed, then runs the projector with the camera
node's current world pose.
"""

from __future__ import annotations

import logging
from typing import Optional

from offaxis.constants import DEFAULT_FAR_CLIP, DEFAULT_NEAR_CLIP, MIN_PLANE_SIZE
from offaxis.core.events import EventBus
from offaxis.core.math_utils import mat4_inverse, transform_point
from offaxis.core.scene_graph import SceneNode
from offaxis.core.settings import RigSettings
from offaxis.projection.off_axis import OffAxisProjector, ProjectionResult
from offaxis.projection.plane_surface import PlaneSurface, PlaneSurfaceResult

logger = logging.getLogger(__name__)


class ProjectionRig:
    """One projection plane and one camera, updated together."""

    def __init__(
        self,
        plane_node: SceneNode,
        plane_size,
        camera_node: SceneNode,
        near_clip: float = DEFAULT_NEAR_CLIP,
        far_clip: float = DEFAULT_FAR_CLIP,
        override_near_with_distance: bool = False,
        minimum_size: float = MIN_PLANE_SIZE,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.plane_node = plane_node
        self.camera_node = camera_node
        self.override_near_with_distance = override_near_with_distance

        self.surface = PlaneSurface(minimum_size=minimum_size, event_bus=event_bus)
        self.projector = OffAxisProjector(
            self.surface,
            near_clip=near_clip,
            far_clip=far_clip,
            initial_position=camera_node.get_world_position(),
            event_bus=event_bus,
        )

        self._plane_size = (float(plane_size[0]), float(plane_size[1]))
        self._seen_version: Optional[tuple[int, ...]] = None
        self._size_changed = True

    @classmethod
    def from_settings(
        cls, settings: RigSettings, event_bus: Optional[EventBus] = None,
    ) -> "ProjectionRig":
        plane_node = SceneNode(name="projection_plane")
        plane_node.set_position(*settings.plane.position)
        plane_node.set_quaternion(settings.plane.quaternion)
        plane_node.set_scale(*settings.plane.scale)

        camera_node = SceneNode(name="projection_camera")
        camera_node.set_position(*settings.camera.position)
        camera_node.set_quaternion(settings.camera.quaternion)

        return cls(
            plane_node,
            settings.plane.size,
            camera_node,
            near_clip=settings.camera.near_clip,
            far_clip=settings.camera.far_clip,
            override_near_with_distance=settings.camera.set_near_to_plane,
            minimum_size=settings.plane.minimum_size,
            event_bus=event_bus,
        )

    @property
    def plane_size(self) -> tuple[float, float]:
        return self._plane_size

    def set_plane_size(self, size) -> None:
        new_size = (float(size[0]), float(size[1]))
        if new_size != self._plane_size:
            self._plane_size = new_size
            self._size_changed = True

    def refresh_plane(self) -> PlaneSurfaceResult:
        """Recompute the plane if its node or size changed since last time."""
        version = self.plane_node.world_version()
        if self._size_changed or version != self._seen_version or self.surface.result is None:
            self.surface.recompute(self.plane_node.world_transform(), self._plane_size)
            self._seen_version = version
            self._size_changed = False
        return self.surface.result

    def _snap_camera_back(self, world_position) -> None:
        """Move the camera node so its world position is ``world_position``."""
        parent = self.camera_node.parent
        if parent is None:
            local = world_position
        else:
            to_local = mat4_inverse(parent.world_transform().matrix())
            local = transform_point(to_local, world_position)
        self.camera_node.set_position(*local)
        logger.debug("Camera %r reverted to %s", self.camera_node.name, world_position)

    def step(self) -> ProjectionResult:
        """Refresh the plane and project from the camera node's world pose.

        A rejected camera position is written back to the camera node so
        the host sees it snap to the last accepted world position, also when
        the camera hangs off a parent node.
        """
        self.refresh_plane()
        pose = self.camera_node.world_transform()
        result = self.projector.update(
            pose.position,
            pose.quaternion,
            override_near_with_distance=self.override_near_with_distance,
        )
        if not result.accepted:
            self._snap_camera_back(result.accepted_position)
        return result
