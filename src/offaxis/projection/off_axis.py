"""Off-axis (asymmetric frustum) projection through a planar surface.

Given the current ``PlaneSurfaceResult`` and a camera position, the
projector builds a view matrix that looks perpendicularly into the plane
and an off-center perspective matrix whose near-plane window is the
plane rectangle scaled down by similar triangles.  Projecting the plane's
four corners through ``projection @ view`` lands them exactly on the NDC
corners, so the rendered image fills the rectangle.

Only the camera *position* shapes the result; the camera node's own
orientation is replaced by the plane's.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from offaxis.constants import DEFAULT_FAR_CLIP, DEFAULT_NEAR_CLIP, DISTANCE_EPSILON
from offaxis.core.events import EventBus, EventType
from offaxis.core.math_utils import (
    Mat4, Quat, Vec3,
    as_quat, as_vec3, mat4_frustum, mat4_identity,
    mat4_translation, quat_identity, quat_inverse, quat_multiply,
)
from offaxis.projection.plane_surface import PlaneCorners, PlaneSurface

logger = logging.getLogger(__name__)


def _frozen(a) -> np.ndarray:
    a = np.array(a, dtype=np.float64)
    a.setflags(write=False)
    return a


@dataclass(frozen=True)
class FrustumExtents:
    """Signed near-plane bounds of the asymmetric frustum."""
    left: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    top: float = 0.0


@dataclass(frozen=True, eq=False)
class ProjectionResult:
    """Output of one ``OffAxisProjector.update`` call.

    ``distance`` is the signed camera-to-plane distance computed for the
    position passed to this call, even when ``accepted`` is False.  All
    other fields describe the last accepted state.
    """
    view_matrix: Mat4
    projection_matrix: Mat4
    accepted_position: Vec3
    accepted: bool
    distance: float
    extents: FrustumExtents
    near_clip: float
    far_clip: float
    corner_vectors: Optional[PlaneCorners]
    relative_rotation: Quat


def frustum_extents(
    corners: PlaneCorners,
    right: Vec3,
    up: Vec3,
    camera_position: Vec3,
    near_clip: float,
    distance: float,
) -> FrustumExtents:
    """Project the plane window onto the near plane by similar triangles."""
    scale = near_clip / distance
    return FrustumExtents(
        left=float(np.dot(right, corners.bottom_left - camera_position) * scale),
        right=float(np.dot(right, corners.bottom_right - camera_position) * scale),
        bottom=float(np.dot(up, corners.bottom_left - camera_position) * scale),
        top=float(np.dot(up, corners.top_left - camera_position) * scale),
    )


class OffAxisProjector:
    """Derives view and projection matrices for a camera looking through a plane.

    Parameters
    ----------
    plane : PlaneSurface
        Shared, read-only source of corners and basis.  Must have been
        recomputed at least once before ``update``.
    near_clip, far_clip : float
        Clip distances used when ``update`` does not override them.
    initial_position : sequence of 3 floats
        Accepted position reported until the first accepted update.
    event_bus : EventBus, optional
        Receives ``PROJECTION_UPDATED`` / ``PROJECTION_REJECTED``.
    """

    def __init__(
        self,
        plane: PlaneSurface,
        near_clip: float = DEFAULT_NEAR_CLIP,
        far_clip: float = DEFAULT_FAR_CLIP,
        initial_position=(0.0, 0.0, 0.0),
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.plane = plane
        self.near_clip = float(near_clip)
        self.far_clip = float(far_clip)
        self.event_bus = event_bus

        self.last_valid_position: Vec3 = as_vec3(initial_position)
        self._last: ProjectionResult = ProjectionResult(
            view_matrix=_frozen(mat4_identity()),
            projection_matrix=_frozen(mat4_identity()),
            accepted_position=_frozen(self.last_valid_position),
            accepted=False,
            distance=0.0,
            extents=FrustumExtents(),
            near_clip=self.near_clip,
            far_clip=self.far_clip,
            corner_vectors=None,
            relative_rotation=_frozen(quat_identity()),
        )

    @property
    def last_result(self) -> ProjectionResult:
        return self._last

    @property
    def view_matrix(self) -> Mat4:
        return self._last.view_matrix

    @property
    def projection_matrix(self) -> Mat4:
        return self._last.projection_matrix

    def update(
        self,
        camera_position,
        camera_orientation,
        near_clip: Optional[float] = None,
        far_clip: Optional[float] = None,
        override_near_with_distance: bool = False,
    ) -> ProjectionResult:
        """Recompute the matrices for a new camera pose.

        A camera behind the plane (negative signed distance) is rejected:
        the previous accepted position, clip planes and matrices are kept
        and returned with ``accepted=False``.
        """
        plane = self.plane.result
        if plane is None:
            raise RuntimeError("PlaneSurface.recompute() must run before OffAxisProjector.update()")

        cam = as_vec3(camera_position)
        cam_q = as_quat(camera_orientation)
        right, up, normal = plane.basis.right, plane.basis.up, plane.basis.normal

        distance = float(-np.dot(plane.center - cam, normal))

        if distance < 0.0:
            logger.debug("Camera at %s is behind the plane (distance=%.6g); keeping %s",
                         cam, distance, self.last_valid_position)
            rejected = ProjectionResult(
                view_matrix=self._last.view_matrix,
                projection_matrix=self._last.projection_matrix,
                accepted_position=_frozen(self.last_valid_position),
                accepted=False,
                distance=distance,
                extents=self._last.extents,
                near_clip=self._last.near_clip,
                far_clip=self._last.far_clip,
                corner_vectors=self._last.corner_vectors,
                relative_rotation=self._last.relative_rotation,
            )
            if self.event_bus is not None:
                self.event_bus.publish(EventType.PROJECTION_REJECTED,
                                       result=rejected, camera_position=cam)
            return rejected

        self.last_valid_position = cam.copy()

        safe_distance = distance
        if safe_distance < DISTANCE_EPSILON:
            logger.debug("Camera-plane distance %.3g clamped to %.3g", distance, DISTANCE_EPSILON)
            safe_distance = DISTANCE_EPSILON

        if far_clip is not None:
            self.far_clip = float(far_clip)
        if override_near_with_distance:
            self.near_clip = safe_distance
        elif near_clip is not None:
            self.near_clip = float(near_clip)

        extents = frustum_extents(plane.corners, right, up, cam, self.near_clip, safe_distance)
        projection = mat4_frustum(
            extents.left, extents.right, extents.bottom, extents.top,
            self.near_clip, self.far_clip,
        )

        # View uses the plane's orientation, not the camera node's.
        # relative_rotation reports what would align the node with it.
        translation = mat4_translation(-cam[0], -cam[1], -cam[2])
        view = plane.basis_matrix @ translation

        result = ProjectionResult(
            view_matrix=_frozen(view),
            projection_matrix=_frozen(projection),
            accepted_position=_frozen(cam),
            accepted=True,
            distance=distance,
            extents=extents,
            near_clip=self.near_clip,
            far_clip=self.far_clip,
            corner_vectors=plane.corners.shifted(-cam),
            relative_rotation=_frozen(quat_multiply(quat_inverse(cam_q), plane.orientation)),
        )
        self._last = result
        if self.event_bus is not None:
            self.event_bus.publish(EventType.PROJECTION_UPDATED, result=result)
        return result
