"""Rig configuration: plane, camera and gizmo settings.

Rotations may be given either as ``rotation_deg`` (XYZ Euler angles in
degrees) or ``quaternion`` ([x, y, z, w]).  Unknown keys are ignored.
"""

from dataclasses import dataclass, field
from typing import Any

from offaxis.constants import (
    DEFAULT_CAMERA_POS,
    DEFAULT_FAR_CLIP,
    DEFAULT_NEAR_CLIP,
    DEFAULT_PLANE_SIZE,
    MIN_PLANE_SIZE,
)
from offaxis.core.math_utils import (
    Quat, as_quat, deg_to_rad, quat_from_euler, quat_identity,
)


def _triple(data: dict, key: str, default) -> tuple[float, float, float]:
    value = data.get(key, default)
    if len(value) != 3:
        raise ValueError(f"'{key}' must have 3 components, got {value!r}")
    return tuple(float(v) for v in value)


def _rotation(data: dict) -> Quat:
    if "quaternion" in data:
        return as_quat(data["quaternion"])
    if "rotation_deg" in data:
        rx, ry, rz = _triple(data, "rotation_deg", (0.0, 0.0, 0.0))
        return quat_from_euler(deg_to_rad(rx), deg_to_rad(ry), deg_to_rad(rz))
    return quat_identity()


@dataclass
class PlaneSettings:
    """Projection plane transform and size."""
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    quaternion: Quat = field(default_factory=quat_identity)
    scale: tuple[float, float, float] = (1.0, 1.0, 1.0)
    size: tuple[float, float] = DEFAULT_PLANE_SIZE
    minimum_size: float = MIN_PLANE_SIZE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlaneSettings":
        size = data.get("size", DEFAULT_PLANE_SIZE)
        if len(size) != 2:
            raise ValueError(f"'size' must have 2 components, got {size!r}")
        return cls(
            position=_triple(data, "position", (0.0, 0.0, 0.0)),
            quaternion=_rotation(data),
            scale=_triple(data, "scale", (1.0, 1.0, 1.0)),
            size=(float(size[0]), float(size[1])),
            minimum_size=float(data.get("minimum_size", MIN_PLANE_SIZE)),
        )


@dataclass
class CameraSettings:
    """Projecting camera pose and clip planes."""
    position: tuple[float, float, float] = DEFAULT_CAMERA_POS
    quaternion: Quat = field(default_factory=quat_identity)
    near_clip: float = DEFAULT_NEAR_CLIP
    far_clip: float = DEFAULT_FAR_CLIP
    # Set the near clip to the camera-to-plane distance on every update
    set_near_to_plane: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CameraSettings":
        near = float(data.get("near_clip", DEFAULT_NEAR_CLIP))
        far = float(data.get("far_clip", DEFAULT_FAR_CLIP))
        if near <= 0.0 or far <= near:
            raise ValueError(f"Invalid clip range: near={near}, far={far}")
        return cls(
            position=_triple(data, "position", DEFAULT_CAMERA_POS),
            quaternion=_rotation(data),
            near_clip=near,
            far_clip=far,
            set_near_to_plane=bool(data.get("set_near_to_plane", False)),
        )


@dataclass
class GizmoSettings:
    """Debug drawing toggles."""
    draw_plane: bool = True
    draw_camera: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GizmoSettings":
        return cls(
            draw_plane=bool(data.get("draw_plane", True)),
            draw_camera=bool(data.get("draw_camera", True)),
        )


@dataclass
class RigSettings:
    """Everything needed to build a ``ProjectionRig``."""
    plane: PlaneSettings = field(default_factory=PlaneSettings)
    camera: CameraSettings = field(default_factory=CameraSettings)
    gizmos: GizmoSettings = field(default_factory=GizmoSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RigSettings":
        return cls(
            plane=PlaneSettings.from_dict(data.get("plane", {})),
            camera=CameraSettings.from_dict(data.get("camera", {})),
            gizmos=GizmoSettings.from_dict(data.get("gizmos", {})),
        )
