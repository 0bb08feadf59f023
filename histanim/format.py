"""Text container for aggregated frames (.frames intermediate files)."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Tuple, Union

from .aggregate import FrameRecord
from .constants import COUNT_CAP

METADATA_PREFIX = "metadata "
METADATA_KEYS = ("version", "height", "width", "sec_per_frame", "bbox", "centre", "projection")

PathLike = Union[str, Path]


def format_number(value: float) -> str:
    """Canonical decimal text: integral values lose their '.0'."""
    if isinstance(value, int):
        return str(value)
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_frame_line(record: FrameRecord) -> str:
    parts = [str(record.frame_no)]
    for pixel_idx, count in record.deltas:
        parts.append(f"{pixel_idx},{count}")
    return ",".join(parts)


def parse_frame_line(line: str) -> FrameRecord:
    fields = line.strip().split(",")
    try:
        frame_no = int(fields[0])
        values = [int(v) for v in fields[1:]]
    except ValueError as exc:
        raise ValueError(f"Malformed frame line: {line!r}") from exc
    if len(values) % 2 != 0:
        raise ValueError(f"Pixel index without count in frame {frame_no}")
    deltas: List[Tuple[int, int]] = []
    for pixel_idx, count in zip(values[0::2], values[1::2]):
        if pixel_idx < 0 or count < 0 or count > COUNT_CAP:
            raise ValueError(f"Invalid delta ({pixel_idx}, {count}) in frame {frame_no}")
        deltas.append((pixel_idx, count))
    return FrameRecord(frame_no, deltas)


def write_header(f, metadata: Mapping[str, object]) -> None:
    """Write the metadata block and its terminating blank line."""
    for key in METADATA_KEYS:
        if key not in metadata:
            raise ValueError(f"Missing metadata field {key!r}")
        value = metadata[key]
        if isinstance(value, (tuple, list)):
            text = ",".join(format_number(v) for v in value)
        elif isinstance(value, (int, float)):
            text = format_number(value)
        else:
            text = str(value)
        if not text or " " in text:
            raise ValueError(f"Metadata value for {key!r} must be a single non-empty word: {text!r}")
        f.write(f"{METADATA_PREFIX}{key} {text}\n")
    f.write("\n")


def read_header(f) -> Dict[str, str]:
    metadata: Dict[str, str] = {}
    for raw in f:
        line = raw.rstrip("\r\n")
        if not line:
            break
        if not line.startswith(METADATA_PREFIX):
            raise ValueError(f"Expected metadata line, got {line!r}")
        words = line[len(METADATA_PREFIX):].split(" ")
        if len(words) != 2 or not words[0]:
            raise ValueError(f"Malformed metadata line: {line!r}")
        metadata[words[0]] = words[1]
    return metadata


def write_intermediate(path: PathLike, frames: Iterable[FrameRecord], metadata: Mapping[str, object]) -> int:
    """Write metadata plus one line per frame; returns the number of frames written."""
    count = 0
    with open(path, "w", encoding="utf-8") as f:
        write_header(f, metadata)
        for record in frames:
            f.write(format_frame_line(record))
            f.write("\n")
            count += 1
    return count


def read_metadata(path: PathLike) -> Dict[str, str]:
    with open(path, "r", encoding="utf-8") as f:
        return read_header(f)


def read_frames(path: PathLike) -> List[FrameRecord]:
    with open(path, "r", encoding="utf-8") as f:
        read_header(f)
        return _read_body(f)


def read_intermediate(path: PathLike) -> Tuple[Dict[str, str], List[FrameRecord]]:
    with open(path, "r", encoding="utf-8") as f:
        metadata = read_header(f)
        frames = _read_body(f)
    return metadata, frames


def _read_body(f) -> List[FrameRecord]:
    frames: List[FrameRecord] = []
    prev: int | None = None
    for raw in f:
        line = raw.strip()
        if not line:
            continue
        record = parse_frame_line(line)
        if prev is not None and record.frame_no <= prev:
            raise ValueError(f"Frame {record.frame_no} follows frame {prev}; frames must be strictly ascending")
        prev = record.frame_no
        frames.append(record)
    return frames
