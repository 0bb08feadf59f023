"""Output sinks: palette-indexed animated GIF and numbered PNG stills."""
from __future__ import annotations

import itertools
from pathlib import Path
from typing import Iterable, Union

import imageio.v2 as imageio
import numpy as np
from PIL import GifImagePlugin, Image

from .aggregate import FrameRecord
from .constants import FRAME_DELAY_MS, PLAYBACK_FPS
from .palette import ColourRamp
from .raster import RenderedFrame, render_frames

GIF_MAX_SIDE = 0xFFFF
REPORT_EVERY_FRAMES = 30
GIF_TRAILER = b";"


def playback_summary(sec_per_frame: int, fps: int = PLAYBACK_FPS) -> str:
    """Describe how much underlying time one second of playback covers."""
    return f"1 second of animation = {sec_per_frame * fps} seconds of edits ({fps} fps x {sec_per_frame} s/frame)"


def grayscale_rgb(frame: RenderedFrame) -> np.ndarray:
    """Replicate an intensity buffer into an (H, W, 3) uint8 image."""
    return np.repeat(frame.intensity[:, :, None], 3, axis=2)


def _report(frame_no: int) -> None:
    if frame_no % REPORT_EVERY_FRAMES == 0:
        print(f"Wrote frame {frame_no}")


def write_animation(
    frames: Iterable[FrameRecord],
    output_path: Union[str, Path],
    width: int,
    height: int,
    ramp: ColourRamp,
) -> int:
    """
    Render frames and write a looping GIF with a single global palette.

    Every frame is written as its own image block, so identical consecutive
    frames stay separate and the GIF holds exactly one frame per record.
    Frames are rendered lazily; only the current raster is held in memory.
    Returns the number of frames written.
    """
    if width > GIF_MAX_SIDE or height > GIF_MAX_SIDE:
        raise ValueError(f"GIF canvas {width}x{height} exceeds {GIF_MAX_SIDE} pixels per side")

    palette = ramp.gif_palette()

    def to_image(frame: RenderedFrame) -> Image.Image:
        im = Image.frombytes("P", (width, height), ramp.indices_for_frame(frame).tobytes())
        im.putpalette(palette)
        return im

    rendered = render_frames(frames, width, height)
    try:
        first = next(rendered)
    except StopIteration as exc:
        raise ValueError("No frames to animate") from exc

    written = 0
    with open(output_path, "wb") as fp:
        for frame in itertools.chain([first], rendered):
            im = to_image(frame)
            if written == 0:
                header, _ = GifImagePlugin.getheader(
                    im, info={"loop": 0, "duration": FRAME_DELAY_MS, "optimize": False}
                )
                for chunk in header:
                    fp.write(chunk)
            for chunk in GifImagePlugin.getdata(im, duration=FRAME_DELAY_MS):
                fp.write(chunk)
            written += 1
            _report(frame.frame_no)
        fp.write(GIF_TRAILER)
    return written


def write_frame_images(
    frames: Iterable[FrameRecord],
    prefix: str,
    width: int,
    height: int,
) -> int:
    """Write one grayscale PNG per frame as ``{prefix}{frame_no:06d}.png``."""
    written = 0
    for frame in render_frames(frames, width, height):
        imageio.imwrite(f"{prefix}{frame.frame_no:06d}.png", grayscale_rgb(frame))
        written += 1
        _report(frame.frame_no)
    print(
        "Finished. You can convert this to a video with this command:\n\n"
        f"ffmpeg -framerate {PLAYBACK_FPS} -i {prefix}%06d.png output.mp4\n"
    )
    return written
