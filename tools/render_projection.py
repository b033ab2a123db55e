#!/usr/bin/env python3
"""Render projection gizmos for a rig config to PNG snapshots.

Writes two images: an observer view looking at the whole rig, and the
view through the off-axis camera (where the plane outline should line up
with the image border).

Usage::

    python tools/render_projection.py
    python tools/render_projection.py --config my_rig.json --camera 0.4 1.0 -1.5
    python tools/render_projection.py --output results/projection
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from offaxis.core.config_loader import load_rig_settings
from offaxis.core.events import EventBus
from offaxis.core.math_utils import deg_to_rad, mat4_look_at, mat4_perspective, vec3
from offaxis.projection.off_axis import ProjectionResult
from offaxis.projection.rig import ProjectionRig
from offaxis.rendering.camera import Camera
from offaxis.rendering.gizmos import GizmoCollector
from offaxis.rendering.image_renderer import ImageGizmoRenderer

logger = logging.getLogger(__name__)

RESULTS_DIR = Path("results/projection")


def observer_view_projection(rig: ProjectionRig, width: int, height: int) -> np.ndarray:
    """View-projection of a third-person camera framing plane and camera."""
    plane = rig.surface.result
    cam = rig.camera_node.get_world_position()
    target = (plane.center + cam) / 2.0
    span = max(float(np.linalg.norm(plane.center - cam)), float(np.hypot(*plane.size)))
    eye = target + plane.basis.up * span * 0.8 + plane.basis.right * span * 1.2 \
        + plane.basis.normal * span * 0.6
    view = mat4_look_at(eye, target, vec3(0, 1, 0))
    proj = mat4_perspective(deg_to_rad(50.0), width / height, 0.05, 1000.0)
    return proj @ view


def format_result(result: ProjectionResult) -> str:
    e = result.extents
    status = "accepted" if result.accepted else "REJECTED (camera behind plane)"
    return (
        f"status:   {status}\n"
        f"position: {np.round(result.accepted_position, 4).tolist()}\n"
        f"distance: {result.distance:.6f}\n"
        f"near/far: {result.near_clip:.4f} / {result.far_clip:.1f}\n"
        f"extents:  left={e.left:.6f} right={e.right:.6f} "
        f"bottom={e.bottom:.6f} top={e.top:.6f}"
    )


def render_projection(
    config: str | None = None,
    camera_position=None,
    output_dir: Path | None = None,
    width: int = 800,
    height: int = 600,
) -> tuple[ProjectionResult, dict[str, Path]]:
    """Run one rig step and write observer and through-camera snapshots."""
    settings = load_rig_settings(config)
    if camera_position is not None:
        settings.camera.position = tuple(float(v) for v in camera_position)

    bus = EventBus()
    collector = GizmoCollector(
        bus,
        draw_plane=settings.gizmos.draw_plane,
        draw_camera=settings.gizmos.draw_camera,
    )
    rig = ProjectionRig.from_settings(settings, event_bus=bus)
    result = rig.step()
    frame = collector.frame()

    output_dir = Path(output_dir) if output_dir else RESULTS_DIR
    paths: dict[str, Path] = {}

    observer = ImageGizmoRenderer(
        width, height, observer_view_projection(rig, width, height), title="Observer",
    )
    observer.draw(frame)
    paths["observer"] = observer.save(output_dir / "observer.png")

    camera = Camera()
    camera.apply_projection(result)
    through = ImageGizmoRenderer(
        width, height, camera.get_view_projection(), title="Through projection camera",
    )
    through.draw(frame)
    paths["camera"] = through.save(output_dir / "camera.png")

    for name, path in paths.items():
        logger.info("Wrote %s view: %s", name, path)
    return result, paths


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render off-axis projection gizmos")
    parser.add_argument("--config", type=str, help="Rig config path or name under assets/config/")
    parser.add_argument("--camera", type=float, nargs=3, metavar=("X", "Y", "Z"),
                        help="Override the camera position")
    parser.add_argument("--output", type=str, help="Output directory")
    parser.add_argument("--size", type=int, nargs=2, default=(800, 600),
                        metavar=("W", "H"), help="Image size in pixels")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    result, _ = render_projection(
        config=args.config,
        camera_position=args.camera,
        output_dir=Path(args.output) if args.output else None,
        width=args.size[0],
        height=args.size[1],
    )
    print(format_result(result))
    return 0 if result.accepted else 1


if __name__ == "__main__":
    sys.exit(main())
