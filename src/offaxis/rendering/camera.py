"""Camera that renders either a symmetric perspective or an off-axis projection."""

from typing import Optional

from offaxis.constants import DEFAULT_CAMERA_POS, DEFAULT_FAR_CLIP, DEFAULT_FOV, DEFAULT_NEAR_CLIP
from offaxis.core.math_utils import (
    Mat4,
    Quat,
    Vec3,
    as_quat,
    deg_to_rad,
    mat4_from_quaternion,
    mat4_identity,
    mat4_perspective,
    mat4_translation,
    quat_identity,
    vec3,
)
from offaxis.projection.off_axis import ProjectionResult


class Camera:
    """A camera that produces view and projection matrices.

    By default the view comes from the camera's own position and
    quaternion and the projection is a symmetric perspective.  After
    ``apply_projection`` both matrices come from the off-axis result
    until ``clear_projection`` is called.

    Parameters
    ----------
    fov : float
        Vertical field-of-view in degrees.
    near : float
        Near clipping plane distance.
    far : float
        Far clipping plane distance.
    """

    def __init__(
        self,
        fov: float = DEFAULT_FOV,
        near: float = DEFAULT_NEAR_CLIP,
        far: float = DEFAULT_FAR_CLIP,
    ) -> None:
        self.fov = fov
        self.near = near
        self.far = far
        self.aspect: float = 1.0

        self.position: Vec3 = vec3(*DEFAULT_CAMERA_POS)
        self.quaternion: Quat = quat_identity()

        # Cached matrices (recomputed on demand)
        self._view_dirty: bool = True
        self._proj_dirty: bool = True
        self._view: Mat4 = mat4_identity()
        self._proj: Mat4 = mat4_identity()

        self._off_axis: Optional[ProjectionResult] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def is_off_axis(self) -> bool:
        return self._off_axis is not None

    def set_aspect(self, width: int, height: int) -> None:
        """Update the aspect ratio from viewport dimensions."""
        if height > 0:
            self.aspect = width / height
            self._proj_dirty = True

    def get_view_matrix(self) -> Mat4:
        """Return the current view (world-to-eye) matrix."""
        if self._off_axis is not None:
            return self._off_axis.view_matrix
        if self._view_dirty:
            rot = mat4_from_quaternion(self.quaternion)
            self._view = rot.T @ mat4_translation(*(-self.position))
            self._view_dirty = False
        return self._view

    def get_projection_matrix(self) -> Mat4:
        """Return the current projection matrix."""
        if self._off_axis is not None:
            return self._off_axis.projection_matrix
        if self._proj_dirty:
            fov_rad = deg_to_rad(self.fov)
            self._proj = mat4_perspective(fov_rad, self.aspect, self.near, self.far)
            self._proj_dirty = False
        return self._proj

    def get_view_projection(self) -> Mat4:
        """Return ``projection @ view``."""
        return self.get_projection_matrix() @ self.get_view_matrix()

    def apply_projection(self, result: ProjectionResult) -> None:
        """Adopt an off-axis result: position, clip planes and both matrices."""
        self._off_axis = result
        self.position = vec3(*result.accepted_position)
        self.near = result.near_clip
        self.far = result.far_clip
        self._view_dirty = True
        self._proj_dirty = True

    def clear_projection(self) -> None:
        """Return to the camera's own perspective and orientation."""
        self._off_axis = None
        self._view_dirty = True
        self._proj_dirty = True

    # ------------------------------------------------------------------
    # Convenience mutators (mark view dirty)
    # ------------------------------------------------------------------

    def set_position(self, x: float, y: float, z: float) -> None:
        self.position = vec3(x, y, z)
        self._view_dirty = True

    def set_quaternion(self, q: Quat) -> None:
        self.quaternion = as_quat(q)
        self._view_dirty = True
