"""Colour ramp parsing and intensity -> palette index mapping."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np

from .constants import EMPTY_INDEX, GIF_PALETTE_SIZE, MAX_RAMP_STEPS, OVERFLOW_INDEX
from .raster import RenderedFrame

RGB = Tuple[int, int, int]


def _parse_ints(line: str, count: int, lineno: int) -> List[int]:
    fields = [v.strip() for v in line.split(",")]
    if len(fields) < count:
        raise ValueError(f"Colour ramp line {lineno}: expected {count} values, got {line!r}")
    try:
        return [int(v) for v in fields[:count]]
    except ValueError as exc:
        raise ValueError(f"Colour ramp line {lineno}: non-integer value in {line!r}") from exc


def _check_colour(values: List[int], lineno: int) -> RGB:
    if any(v < 0 or v > 255 for v in values):
        raise ValueError(f"Colour ramp line {lineno}: colour components must be 0..255, got {values}")
    return (values[0], values[1], values[2])


@dataclass(frozen=True)
class ColourRamp:
    """
    Empty colour plus ordered (age, colour) steps.

    Palette slot 0 is the empty colour and slots 1..N are the steps in file
    order. Slot 255 is reserved for magnitudes above 255; at most 254 steps
    keeps it free.

    Intensity m maps to slot 255 - m, so a ramp with fewer than 254 steps only
    colours the brightest pixels: slots past the last step render in the empty
    colour and dimmer set pixels become indistinguishable from unedited ones.
    Supply a full 254-step ramp for a complete fade.
    """

    empty_colour: RGB
    steps: List[Tuple[int, RGB]] = field(default_factory=list)

    def __post_init__(self):
        if len(self.steps) > MAX_RAMP_STEPS:
            raise ValueError(f"Too many colour ramp steps: {len(self.steps)} > {MAX_RAMP_STEPS}")

    @classmethod
    def from_text(cls, text: str) -> "ColourRamp":
        lines = [(n, line) for n, line in enumerate(text.splitlines(), start=1) if line.strip()]
        if not lines:
            raise ValueError("Colour ramp is empty")
        first_no, first = lines[0]
        empty = _check_colour(_parse_ints(first, 3, first_no), first_no)

        steps: List[Tuple[int, RGB]] = []
        for lineno, line in lines[1:]:
            age, r, g, b = _parse_ints(line, 4, lineno)
            steps.append((age, _check_colour([r, g, b], lineno)))
        return cls(empty, steps)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ColourRamp":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_text(f.read())

    @property
    def overflow_colour(self) -> RGB:
        return self.steps[-1][1] if self.steps else (255, 255, 255)

    def palette(self) -> bytes:
        out = bytearray(self.empty_colour)
        for _, colour in self.steps:
            out += bytes(colour)
        return bytes(out)

    def gif_palette(self) -> bytes:
        """Full 256-entry palette; unused slots repeat the empty colour."""
        out = bytearray(self.palette())
        used = len(out) // 3
        out += bytes(self.empty_colour) * (GIF_PALETTE_SIZE - used)
        out[OVERFLOW_INDEX * 3 : OVERFLOW_INDEX * 3 + 3] = bytes(self.overflow_colour)
        return bytes(out)

    def index_for_magnitude(self, magnitude: Optional[int]) -> int:
        if magnitude is None:
            return EMPTY_INDEX
        if magnitude > 255:
            return OVERFLOW_INDEX
        return min(max(255 - int(magnitude), 1), OVERFLOW_INDEX - 1)

    def indices_for_frame(self, frame: RenderedFrame) -> np.ndarray:
        """Vectorised ``index_for_magnitude`` over a rendered frame; unset pixels -> empty."""
        inverse = 255 - frame.intensity.astype(np.int16)
        indices = np.clip(inverse, 1, OVERFLOW_INDEX - 1).astype(np.uint8)
        indices[~frame.is_set] = EMPTY_INDEX
        return indices
