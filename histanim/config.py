"""Run configuration merged from command-line options and intermediate metadata."""
from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .constants import PROJECTION_EQUIRECT, PROJECTIONS
from .projection import Projection, build_projection, canvas_width
from .version import __version__

DEFAULT_BBOX = (-180.0, -90.0, 180.0, 90.0)
DEFAULT_CENTRE = (0.0, 0.0)
DEFAULT_PROJECTION = PROJECTION_EQUIRECT


class MissingConfigError(ValueError):
    """A required setting was given neither on the command line nor in metadata."""


def parse_float_list(text: str, count: int) -> Tuple[float, ...]:
    try:
        values = tuple(float(v) for v in text.split(","))
    except ValueError as exc:
        raise ValueError(f"Expected {count} comma-separated numbers, got {text!r}") from exc
    if len(values) != count:
        raise ValueError(f"Expected {count} comma-separated numbers, got {text!r}")
    return values


def _parse_positive_int(name: str, text: Any) -> int:
    try:
        value = int(text)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {text!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class AnimationConfig:
    """Canvas geometry, frame duration and projection for one run."""

    height: int
    width: int
    sec_per_frame: int
    bbox: Tuple[float, float, float, float] = DEFAULT_BBOX
    centre: Tuple[float, float] = DEFAULT_CENTRE
    projection: str = DEFAULT_PROJECTION

    def projector(self) -> Projection:
        return build_projection(self.projection, self.height, self.width, self.bbox, self.centre)

    def to_metadata(self) -> Dict[str, object]:
        return {
            "version": __version__,
            "height": self.height,
            "width": self.width,
            "sec_per_frame": self.sec_per_frame,
            "bbox": self.bbox,
            "centre": self.centre,
            "projection": self.projection,
        }

    @classmethod
    def create(
        cls,
        height: int,
        sec_per_frame: int,
        bbox: Sequence[float] = DEFAULT_BBOX,
        centre: Sequence[float] = DEFAULT_CENTRE,
        projection: str = DEFAULT_PROJECTION,
    ) -> "AnimationConfig":
        """Build a config, deriving the canvas width from the projection."""
        if projection not in PROJECTIONS:
            raise ValueError(f"Unknown projection {projection!r}; choose from {', '.join(PROJECTIONS)}")
        height = _parse_positive_int("height", height)
        sec_per_frame = _parse_positive_int("sec_per_frame", sec_per_frame)
        bbox_t = tuple(float(v) for v in bbox)
        centre_t = tuple(float(v) for v in centre)
        if len(bbox_t) != 4:
            raise ValueError(f"bbox needs 4 values, got {len(bbox_t)}")
        if len(centre_t) != 2:
            raise ValueError(f"centre needs 2 values, got {len(centre_t)}")
        width = canvas_width(projection, height, bbox_t)
        if width <= 0:
            raise ValueError(f"Canvas width is {width}; increase height or widen the bbox")
        return cls(height, width, sec_per_frame, bbox_t, centre_t, projection)


def resolve_config(
    height: Optional[int] = None,
    sec_per_frame: Optional[int] = None,
    bbox: Optional[str] = None,
    centre: Optional[str] = None,
    projection: Optional[str] = None,
    metadata: Optional[Mapping[str, str]] = None,
) -> AnimationConfig:
    """
    Combine explicit options with metadata loaded from an intermediate file.

    Explicit options win over metadata, metadata wins over defaults. Height and
    sec_per_frame have no default.
    """
    metadata = metadata or {}

    if height is None:
        if "height" not in metadata:
            raise MissingConfigError("height must be given on the command line or in loaded metadata")
        height = _parse_positive_int("height", metadata["height"])
    if sec_per_frame is None:
        if "sec_per_frame" not in metadata:
            raise MissingConfigError("sec_per_frame must be given on the command line or in loaded metadata")
        sec_per_frame = _parse_positive_int("sec_per_frame", metadata["sec_per_frame"])

    bbox_text = bbox if bbox is not None else metadata.get("bbox")
    centre_text = centre if centre is not None else metadata.get("centre")
    bbox_t = parse_float_list(bbox_text, 4) if bbox_text is not None else DEFAULT_BBOX
    centre_t = parse_float_list(centre_text, 2) if centre_text is not None else DEFAULT_CENTRE
    projection = projection or metadata.get("projection") or DEFAULT_PROJECTION

    config = AnimationConfig.create(height, sec_per_frame, bbox_t, centre_t, projection)

    if "width" in metadata and str(config.width) != metadata["width"].strip():
        warnings.warn(
            f"Loaded width {metadata['width']} differs from computed width {config.width}; using {config.width}"
        )
    return config
