"""Temporal binning of edit timestamps into animation frames."""
from __future__ import annotations

from .constants import EPOCH, PLAYBACK_FPS


class TimestampBeforeEpochError(ValueError):
    """Raised for an edit timestamp earlier than ``EPOCH``."""


def frame_number(timestamp: int, sec_per_frame: int) -> int:
    """
    Return floor((timestamp - EPOCH) / sec_per_frame).

    The result is not renumbered; the aggregator shifts frames so the first
    observed one becomes 0.
    """
    if sec_per_frame <= 0:
        raise ValueError(f"sec_per_frame must be positive, got {sec_per_frame}")
    timestamp = int(timestamp)
    if timestamp < EPOCH:
        raise TimestampBeforeEpochError(f"timestamp {timestamp} is before epoch {EPOCH}")
    return (timestamp - EPOCH) // int(sec_per_frame)


def frames_to_seconds(num_frames: int, fps: int = PLAYBACK_FPS) -> float:
    """Playback length of ``num_frames`` at ``fps``."""
    return num_frames / float(fps)
