"""Decaying raster accumulator: frame deltas -> per-frame 8-bit intensity buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Tuple

import numpy as np

from .aggregate import FrameRecord
from .constants import DECAY_FACTOR


@dataclass(frozen=True)
class RenderedFrame:
    frame_no: int
    intensity: np.ndarray  # (H, W) uint8
    is_set: np.ndarray     # (H, W) bool


class DecayRaster:
    """
    One raster of optional magnitudes, mutated frame by frame for a whole pass.

    ``is_set`` and ``magnitude`` together encode Unset / Set(value); an unset
    pixel always has magnitude 0.
    """

    def __init__(self, width: int, height: int, decay_factor: float = DECAY_FACTOR):
        if width <= 0 or height <= 0:
            raise ValueError(f"Raster size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.decay_factor = float(decay_factor)
        N = self.width * self.height
        self.is_set = np.zeros((N,), dtype=bool)
        self.magnitude = np.zeros((N,), dtype=np.float64)

    @property
    def pixel_count(self) -> int:
        return self.is_set.shape[0]

    def decay(self) -> None:
        live = self.is_set & (self.magnitude > 0.0)
        self.magnitude[live] *= self.decay_factor

    def accumulate(self, deltas: Sequence[Tuple[int, int]]) -> int:
        """Add counts; returns how many deltas were dropped for being off the raster."""
        if not deltas:
            return 0
        arr = np.asarray(deltas, dtype=np.int64).reshape(-1, 2)
        idx = arr[:, 0]
        counts = arr[:, 1].astype(np.float64)
        keep = (idx >= 0) & (idx < self.pixel_count)
        idx = idx[keep]
        np.add.at(self.magnitude, idx, counts[keep])
        self.is_set[idx] = True
        return int((~keep).sum())

    def max_magnitude(self) -> float:
        if not self.is_set.any():
            return 0.0
        return float(self.magnitude[self.is_set].max())

    def intensities(self) -> np.ndarray:
        out = np.zeros((self.pixel_count,), dtype=np.uint8)
        max_val = self.max_magnitude()
        if max_val <= 0.0:
            return out
        scaled = np.floor(255.0 * (self.magnitude[self.is_set] / max_val) + 0.5)
        out[self.is_set] = np.clip(scaled, 0, 255).astype(np.uint8)
        return out

    def step(self, record: FrameRecord) -> RenderedFrame:
        self.decay()
        self.accumulate(record.deltas)
        shape = (self.height, self.width)
        return RenderedFrame(
            record.frame_no,
            self.intensities().reshape(shape),
            self.is_set.copy().reshape(shape),
        )


def render_frames(frames: Iterable[FrameRecord], width: int, height: int) -> Iterator[RenderedFrame]:
    """Replay frames in order through a single raster, yielding one snapshot per frame."""
    raster = DecayRaster(width, height)
    for record in frames:
        yield raster.step(record)
