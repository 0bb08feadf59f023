"""Sparse per-frame aggregation of projected edit events."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from .constants import COUNT_CAP
from .projection import Projection
from .timebins import frame_number


def saturating_add(a: int, b: int, cap: int = COUNT_CAP) -> int:
    """Add two counts, clamping at ``cap`` instead of wrapping."""
    total = a + b
    return cap if total > cap else total


@dataclass
class FrameRecord:
    """One animation frame: renumbered frame index plus (pixel_index, count) deltas."""

    frame_no: int
    deltas: List[Tuple[int, int]] = field(default_factory=list)

    def as_dict(self) -> Dict[int, int]:
        return dict(self.deltas)


class FrameAggregator:
    """
    Accumulates edit counts keyed by (frame, pixel).

    Memory grows with the number of distinct (frame, pixel) pairs, not with the
    number of events. Dense renumbering happens in ``finalize`` once the whole
    stream has been seen.
    """

    def __init__(self, projection: Projection, sec_per_frame: int):
        if sec_per_frame <= 0:
            raise ValueError(f"sec_per_frame must be positive, got {sec_per_frame}")
        self.projection = projection
        self.sec_per_frame = int(sec_per_frame)
        self._counts: Dict[int, Dict[int, int]] | None = {}
        self.first_frame: int | None = None
        self.last_frame: int | None = None
        self.num_events = 0

    @property
    def num_frames(self) -> int:
        if self.first_frame is None or self.last_frame is None:
            return 0
        return self.last_frame - self.first_frame + 1

    def _counts_or_raise(self) -> Dict[int, Dict[int, int]]:
        if self._counts is None:
            raise RuntimeError("aggregator already finalized")
        return self._counts

    def _track(self, frame_no: int) -> None:
        if self.first_frame is None or frame_no < self.first_frame:
            self.first_frame = frame_no
        if self.last_frame is None or frame_no > self.last_frame:
            self.last_frame = frame_no

    def record(self, lat: float, lon: float, timestamp: int) -> int | None:
        """Count one event. Returns its pixel index, or None when off canvas."""
        counts = self._counts_or_raise()
        frame_no = frame_number(timestamp, self.sec_per_frame)
        self._track(frame_no)
        self.num_events += 1

        pixel_idx = self.projection.project(lat, lon)
        if pixel_idx is None:
            return None
        pixels = counts.setdefault(frame_no, {})
        pixels[pixel_idx] = saturating_add(pixels.get(pixel_idx, 0), 1)
        return pixel_idx

    def record_many(self, events: Iterable[Tuple[float, float, int]]) -> int:
        consumed = 0
        for lat, lon, timestamp in events:
            self.record(lat, lon, timestamp)
            consumed += 1
        return consumed

    def merge(self, other: "FrameAggregator") -> None:
        """Fold another shard's counts into this one."""
        if other.sec_per_frame != self.sec_per_frame:
            raise ValueError(
                f"Cannot merge aggregators with sec_per_frame {self.sec_per_frame} and {other.sec_per_frame}"
            )
        counts = self._counts_or_raise()
        for frame_no, other_pixels in other._counts_or_raise().items():
            pixels = counts.setdefault(frame_no, {})
            for pixel_idx, count in other_pixels.items():
                pixels[pixel_idx] = saturating_add(pixels.get(pixel_idx, 0), count)
        if other.first_frame is not None:
            self._track(other.first_frame)
        if other.last_frame is not None:
            self._track(other.last_frame)
        self.num_events += other.num_events

    def finalize(self) -> List[FrameRecord]:
        """
        Return a gap-free frame sequence renumbered from 0.

        Frames between the first and last observed with no on-canvas edits are
        emitted with empty deltas. The internal map is released afterwards.
        """
        counts = self._counts_or_raise()
        self._counts = None
        if self.first_frame is None:
            return []

        frames: List[FrameRecord] = []
        for offset in range(self.num_frames):
            pixels = counts.pop(self.first_frame + offset, None)
            deltas = list(pixels.items()) if pixels else []
            frames.append(FrameRecord(offset, deltas))
        return frames
