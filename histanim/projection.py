"""Projection of (lat, lon) onto linear pixel indices of the output raster."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Union

from .constants import PROJECTION_EQUIRECT, PROJECTION_ORTHO


class ProjectionInvariantError(RuntimeError):
    """An in-bounds point produced an index outside the canvas."""


@dataclass(frozen=True)
class Equirectangular:
    """Plate carree mapping of a lat/lon bounding box onto ``width x height``."""

    left: float
    bottom: float
    right: float
    top: float
    width: int
    height: int

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def project(self, lat: float, lon: float) -> int | None:
        # Edges are outside; a point on the south edge would otherwise land on row ``height``.
        if lat >= self.top or lat <= self.bottom or lon >= self.right or lon <= self.left:
            return None

        x = math.floor((lon - self.left) / (self.right - self.left) * self.width)
        y = math.floor((self.top - lat) / (self.top - self.bottom) * self.height)
        idx = y * self.width + x
        if idx >= self.pixel_count:
            raise ProjectionInvariantError(
                f"lat={lat} lon={lon} width={self.width} height={self.height} "
                f"bbox={(self.left, self.bottom, self.right, self.top)} x={x} y={y} idx={idx}"
            )
        return idx


@dataclass(frozen=True)
class Orthographic:
    """
    View of the globe from infinitely far away above (centre_lat, centre_lon).

    The visible hemisphere is inscribed in a ``radius x radius`` square canvas.
    """

    centre_lat: float
    centre_lon: float
    radius: int

    @property
    def width(self) -> int:
        return self.radius

    @property
    def height(self) -> int:
        return self.radius

    @property
    def pixel_count(self) -> int:
        return self.radius * self.radius

    def project(self, lat: float, lon: float) -> int | None:
        phi = math.radians(lat)
        phi0 = math.radians(self.centre_lat)
        dlon = math.radians(lon - self.centre_lon)

        cos_c = math.sin(phi0) * math.sin(phi) + math.cos(phi0) * math.cos(phi) * math.cos(dlon)
        if cos_c <= 0.0:
            return None

        u = math.cos(phi) * math.sin(dlon)
        v = math.cos(phi0) * math.sin(phi) - math.sin(phi0) * math.cos(phi) * math.cos(dlon)

        size = self.radius
        x = min(max(math.floor((u + 1.0) / 2.0 * size), 0), size - 1)
        y = min(max(math.floor((1.0 - v) / 2.0 * size), 0), size - 1)
        return y * size + x


Projection = Union[Equirectangular, Orthographic]


def canvas_width(kind: str, height: int, bbox: Sequence[float]) -> int:
    if kind == PROJECTION_ORTHO:
        return int(height)
    if kind == PROJECTION_EQUIRECT:
        left, bottom, right, top = bbox
        if right <= left or top <= bottom:
            raise ValueError(f"Degenerate bounding box {tuple(bbox)}")
        return int((right - left) / (top - bottom) * height)
    raise ValueError(f"Unknown projection {kind!r}")


def build_projection(
    kind: str,
    height: int,
    width: int,
    bbox: Sequence[float],
    centre: Sequence[float],
) -> Projection:
    if kind == PROJECTION_ORTHO:
        return Orthographic(float(centre[0]), float(centre[1]), int(width))
    if kind == PROJECTION_EQUIRECT:
        left, bottom, right, top = (float(v) for v in bbox)
        if right <= left or top <= bottom:
            raise ValueError(f"Degenerate bounding box {tuple(bbox)}")
        return Equirectangular(left, bottom, right, top, int(width), int(height))
    raise ValueError(f"Unknown projection {kind!r}")
