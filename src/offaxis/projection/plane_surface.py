"""Rectangular projection surface: world corners and orthonormal basis.

The surface is a ``size[0]`` by ``size[1]`` rectangle lying in the local
XY plane of its transform, centered on the transform's origin.  Its
normal is the *negated* right x up cross product, so for an identity
transform it is (0, 0, -1) and points toward the side the projecting
camera is expected to sit on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from offaxis.constants import MIN_PLANE_SIZE
from offaxis.core.events import EventBus, EventType
from offaxis.core.math_utils import Mat4, Quat, Vec3, normalize
from offaxis.core.scene_graph import Transform

logger = logging.getLogger(__name__)


def _frozen(a) -> np.ndarray:
    a = np.array(a, dtype=np.float64)
    a.setflags(write=False)
    return a


@dataclass(frozen=True, eq=False)
class PlaneCorners:
    """The four rectangle corners (or per-corner vectors)."""
    top_left: Vec3
    top_right: Vec3
    bottom_left: Vec3
    bottom_right: Vec3

    def as_array(self) -> np.ndarray:
        """(4, 3) array ordered TL, TR, BL, BR."""
        return np.stack([self.top_left, self.top_right, self.bottom_left, self.bottom_right])

    def shifted(self, offset: Vec3) -> "PlaneCorners":
        """Corners with ``offset`` added to each, e.g. ``-camera_position``."""
        return PlaneCorners(
            _frozen(self.top_left + offset),
            _frozen(self.top_right + offset),
            _frozen(self.bottom_left + offset),
            _frozen(self.bottom_right + offset),
        )


@dataclass(frozen=True, eq=False)
class PlaneBasis:
    """Orthonormal world-space frame of the rectangle."""
    right: Vec3
    up: Vec3
    normal: Vec3


@dataclass(frozen=True, eq=False)
class PlaneSurfaceResult:
    """Derived state of a ``PlaneSurface`` for one (transform, size) input."""
    corners: PlaneCorners
    basis: PlaneBasis
    basis_matrix: Mat4
    center: Vec3
    orientation: Quat
    size: tuple[float, float]


def basis_matrix_from(basis: PlaneBasis) -> Mat4:
    """World-to-plane rotation: upper-left rows are right, up, normal."""
    m = np.zeros((4, 4), dtype=np.float64)
    m[0, :3] = basis.right
    m[1, :3] = basis.up
    m[2, :3] = basis.normal
    m[3, 3] = 1.0
    return m


class PlaneSurface:
    """Computes corners and basis of a planar projection target.

    Parameters
    ----------
    minimum_size : float
        Smallest allowed width/height.  Values below ``MIN_PLANE_SIZE``
        are raised to it.
    event_bus : EventBus, optional
        Receives ``PLANE_RECOMPUTED`` after every recompute.
    """

    def __init__(
        self,
        minimum_size: float = MIN_PLANE_SIZE,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.minimum_size = max(float(minimum_size), MIN_PLANE_SIZE)
        self.event_bus = event_bus
        self._result: Optional[PlaneSurfaceResult] = None

    @property
    def result(self) -> Optional[PlaneSurfaceResult]:
        """Most recent recompute output, ``None`` before the first one."""
        return self._result

    def clamp_size(self, size) -> tuple[float, float]:
        w, h = float(size[0]), float(size[1])
        return max(w, self.minimum_size), max(h, self.minimum_size)

    def recompute(self, transform: Transform, size) -> PlaneSurfaceResult:
        """Derive world corners, basis and basis matrix."""
        w, h = self.clamp_size(size)
        if (w, h) != (float(size[0]), float(size[1])):
            logger.debug("Plane size %s clamped to (%g, %g)", tuple(size), w, h)

        m = transform.matrix()
        hw, hh = w * 0.5, h * 0.5
        local = np.array([
            [-hw, hh, 0.0, 1.0],
            [hw, hh, 0.0, 1.0],
            [-hw, -hh, 0.0, 1.0],
            [hw, -hh, 0.0, 1.0],
        ], dtype=np.float64)
        tl, tr, bl, br = (m @ local.T).T[:, :3]

        up = normalize(tl - bl)
        right = normalize(br - bl)
        normal = -normalize(np.cross(right, up))

        basis = PlaneBasis(_frozen(right), _frozen(up), _frozen(normal))
        result = PlaneSurfaceResult(
            corners=PlaneCorners(_frozen(tl), _frozen(tr), _frozen(bl), _frozen(br)),
            basis=basis,
            basis_matrix=_frozen(basis_matrix_from(basis)),
            center=_frozen(transform.position),
            orientation=_frozen(transform.quaternion),
            size=(w, h),
        )
        self._result = result
        logger.debug("Plane recomputed: center=%s normal=%s size=(%g, %g)",
                     result.center, result.basis.normal, w, h)

        if self.event_bus is not None:
            self.event_bus.publish(EventType.PLANE_RECOMPUTED, result=result)
        return result
