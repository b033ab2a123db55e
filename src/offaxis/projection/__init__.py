"""Off-axis projection core: plane surface, projector and rig adapter."""

from offaxis.projection.off_axis import (
    FrustumExtents,
    OffAxisProjector,
    ProjectionResult,
    frustum_extents,
)
from offaxis.projection.plane_surface import (
    PlaneBasis,
    PlaneCorners,
    PlaneSurface,
    PlaneSurfaceResult,
    basis_matrix_from,
)
from offaxis.projection.rig import ProjectionRig

__all__ = [
    "FrustumExtents",
    "OffAxisProjector",
    "PlaneBasis",
    "PlaneCorners",
    "PlaneSurface",
    "PlaneSurfaceResult",
    "ProjectionResult",
    "ProjectionRig",
    "basis_matrix_from",
    "frustum_extents",
]
