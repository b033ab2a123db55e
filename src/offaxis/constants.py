"""Shared constants and paths for offaxis."""

from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
ASSETS_DIR = PROJECT_ROOT / "assets"
CONFIG_DIR = ASSETS_DIR / "config"
DEFAULT_RIG_CONFIG = "rig_default.json"

# Projection plane
MIN_PLANE_SIZE = 0.01  # Floor for the configurable minimum size
DEFAULT_PLANE_SIZE = (1.6, 0.9)

# Signed camera-to-plane distances below this are clamped before dividing
DISTANCE_EPSILON = 1e-6

# Camera defaults
DEFAULT_NEAR_CLIP = 0.3
DEFAULT_FAR_CLIP = 1000.0
DEFAULT_FOV = 60.0
DEFAULT_CAMERA_POS = (0.0, 0.0, -2.0)

# Gizmo colors (RGB)
GIZMO_PLANE_COLOR = (40, 90, 255)
GIZMO_UP_COLOR = (40, 220, 60)
GIZMO_RIGHT_COLOR = (235, 40, 40)
GIZMO_CORNER_RAY_COLOR = (40, 220, 60)
GIZMO_VIEW_DIR_COLOR = (0, 230, 230)
