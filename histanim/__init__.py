"""Animated rasters of where and when geographic edits happened."""
from .constants import (
    EPOCH,
    DECAY_FACTOR,
    COUNT_CAP,
    MAX_RAMP_STEPS,
    EMPTY_INDEX,
    OVERFLOW_INDEX,
    PLAYBACK_FPS,
    FRAME_DELAY_MS,
    PROJECTION_ORTHO,
    PROJECTION_EQUIRECT,
)
from .timebins import TimestampBeforeEpochError, frame_number
from .projection import Equirectangular, Orthographic, ProjectionInvariantError, build_projection, canvas_width
from .aggregate import FrameAggregator, FrameRecord, saturating_add
from .config import AnimationConfig, MissingConfigError, resolve_config
from .format import read_frames, read_intermediate, read_metadata, write_intermediate
from .raster import DecayRaster, RenderedFrame, render_frames
from .palette import ColourRamp
from .ingest import aggregate_events, aggregate_file
from .writers import write_animation, write_frame_images
from .version import __version__, get_version_string

__all__ = [
    "EPOCH",
    "DECAY_FACTOR",
    "COUNT_CAP",
    "MAX_RAMP_STEPS",
    "EMPTY_INDEX",
    "OVERFLOW_INDEX",
    "PLAYBACK_FPS",
    "FRAME_DELAY_MS",
    "PROJECTION_ORTHO",
    "PROJECTION_EQUIRECT",
    "TimestampBeforeEpochError",
    "frame_number",
    "Equirectangular",
    "Orthographic",
    "ProjectionInvariantError",
    "build_projection",
    "canvas_width",
    "FrameAggregator",
    "FrameRecord",
    "saturating_add",
    "AnimationConfig",
    "MissingConfigError",
    "resolve_config",
    "read_frames",
    "read_intermediate",
    "read_metadata",
    "write_intermediate",
    "DecayRaster",
    "RenderedFrame",
    "render_frames",
    "ColourRamp",
    "aggregate_events",
    "aggregate_file",
    "write_animation",
    "write_frame_images",
    "get_version_string",
    "__version__",
]
