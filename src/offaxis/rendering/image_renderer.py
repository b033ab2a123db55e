"""Headless gizmo renderer: rasterizes gizmo frames to a PIL image.

Usage::

    renderer = ImageGizmoRenderer(800, 600, camera.get_view_projection())
    collector = GizmoCollector(bus, renderer)
    rig.step()
    renderer.save("results/projection.png")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw

from offaxis.core.math_utils import Mat4, world_to_screen
from offaxis.rendering.gizmos import GizmoFrame


class ImageGizmoRenderer:
    """Draws gizmo lines and labels through a fixed view-projection matrix.

    Segments with an endpoint behind the viewer are skipped rather than
    clipped.
    """

    def __init__(
        self,
        width: int,
        height: int,
        view_projection: Mat4,
        bg_color: tuple[int, int, int] = (30, 30, 40),
        title: str = "",
    ) -> None:
        self.width = width
        self.height = height
        self.view_projection = np.asarray(view_projection, dtype=np.float64)
        self.bg_color = bg_color
        self.title = title
        self.image = Image.new("RGB", (width, height), bg_color)
        self.skipped_lines = 0

    def _project(self, p) -> tuple[float, float, bool]:
        return world_to_screen(p, self.view_projection, self.width, self.height)

    def draw(self, frame: GizmoFrame) -> None:
        """Replace the image contents with ``frame``."""
        self.image = Image.new("RGB", (self.width, self.height), self.bg_color)
        draw = ImageDraw.Draw(self.image)
        self.skipped_lines = 0

        for line in frame.lines:
            x0, y0, front0 = self._project(line.start)
            x1, y1, front1 = self._project(line.end)
            if not (front0 and front1):
                self.skipped_lines += 1
                continue
            draw.line([(x0, y0), (x1, y1)], fill=line.color, width=2)

        for label in frame.labels:
            x, y, front = self._project(label.position)
            if front:
                draw.text((x + 4, y - 12), label.text, fill=(230, 230, 230))

        if self.title:
            draw.text((10, 10), self.title, fill=(255, 255, 255))

    def save(self, output_path: str | Path) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.image.save(str(output_path))
        return output_path
