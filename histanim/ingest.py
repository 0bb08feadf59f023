"""Ingestion pass: events -> aggregated, densely numbered frames."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Tuple, Union

from .aggregate import FrameAggregator, FrameRecord
from .config import AnimationConfig
from .projection import Projection
from .sources import DEFAULT_CHUNK_SIZE, iter_point_table
from .timebins import frames_to_seconds

REPORT_EVERY = 50_000_000


def aggregate_events(
    events: Iterable[Tuple[float, float, int]],
    projection: Projection,
    sec_per_frame: int,
    report_every: int = REPORT_EVERY,
) -> List[FrameRecord]:
    """
    Bin and project every event, then finalize into a gap-free frame list.

    Timestamps before the epoch abort the pass; events off the canvas are
    dropped but still extend the frame range.
    """
    aggregator = FrameAggregator(projection, sec_per_frame)
    for lat, lon, timestamp in events:
        aggregator.record(lat, lon, timestamp)
        if report_every and aggregator.num_events % report_every == 0:
            print(f"Read {aggregator.num_events // 1_000_000} million points")

    num_frames = aggregator.num_frames
    print(f"Read {aggregator.num_events} points")
    print(f"There are {num_frames} frames, which is {frames_to_seconds(num_frames):.2f} sec")
    return aggregator.finalize()


def aggregate_file(
    input_path: Union[str, Path],
    config: AnimationConfig,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> List[FrameRecord]:
    return aggregate_events(
        iter_point_table(input_path, chunk_size=chunk_size),
        config.projector(),
        config.sec_per_frame,
    )
