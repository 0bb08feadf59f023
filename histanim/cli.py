"""Command-line entrypoint for OSM history animation."""
from __future__ import annotations

import argparse

from .config import MissingConfigError, resolve_config
from .format import read_intermediate, write_intermediate
from .ingest import aggregate_file
from .palette import ColourRamp
from .sources import DEFAULT_CHUNK_SIZE
from .version import get_version_string
from .writers import playback_summary, write_animation, write_frame_images


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="histanim",
        description="Animate where and when geographic edits happened",
        epilog="Values starting with '-' need the '=' form, e.g. --bbox=-10,-10,10,10",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version_string()}")
    parser.add_argument("-i", "--input", required=True, help="Point table (CSV/TSV) or intermediate file")
    parser.add_argument("-o", "--output", required=True, help="GIF path, PNG prefix, or intermediate file")
    parser.add_argument("--height", type=int, default=None, help="Canvas height in pixels")
    parser.add_argument("-s", "--sec-per-frame", type=int, default=None, help="Seconds of history per frame")
    parser.add_argument("--colour-ramp", default=None, help="Colour ramp file (required for GIF output)")
    parser.add_argument("--save-intermediate", action="store_true", help="Write aggregated frames and stop")
    parser.add_argument("--load-intermediate", action="store_true", help="Read aggregated frames from --input")
    parser.add_argument("-b", "--bbox", default=None, help="left,bottom,right,top (equirect)")
    parser.add_argument("-c", "--centre", "--center", dest="centre", default=None, help="lat,lon (ortho)")
    parser.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE, help="Rows read per chunk")

    proj = parser.add_mutually_exclusive_group()
    proj.add_argument("--ortho", dest="projection", action="store_const", const="ortho")
    proj.add_argument("--equirect", dest="projection", action="store_const", const="equirect")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--gif", dest="output_mode", action="store_const", const="gif", help="Animated GIF (default)")
    mode.add_argument("--frames", dest="output_mode", action="store_const", const="frames", help="Numbered PNG stills")
    parser.set_defaults(projection=None, output_mode="gif")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.save_intermediate and args.load_intermediate:
        parser.error("--save-intermediate and --load-intermediate cannot be combined")
    if not args.save_intermediate and args.output_mode == "gif" and args.colour_ramp is None:
        parser.error("--colour-ramp is required for GIF output")

    metadata: dict[str, str] = {}
    frames = None
    if args.load_intermediate:
        print(f"Reading frames from {args.input}")
        metadata, frames = read_intermediate(args.input)

    try:
        config = resolve_config(
            height=args.height,
            sec_per_frame=args.sec_per_frame,
            bbox=args.bbox,
            centre=args.centre,
            projection=args.projection,
            metadata=metadata,
        )
    except MissingConfigError as exc:
        parser.error(str(exc))

    if frames is None:
        print(f"Reading points from {args.input}")
        frames = aggregate_file(args.input, config, chunk_size=args.chunk_size)

    if args.save_intermediate:
        print(f"Saving frame details to {args.output}")
        write_intermediate(args.output, frames, config.to_metadata())
    elif args.output_mode == "frames":
        print(f"Creating frames with prefix {args.output}")
        write_frame_images(frames, args.output, config.width, config.height)
    else:
        ramp = ColourRamp.from_file(args.colour_ramp)
        print(f"Creating image {args.output}")
        print(playback_summary(config.sec_per_frame))
        write_animation(frames, args.output, config.width, config.height, ramp)

    print(f"Finished. Frames={len(frames)}, Size={config.height}x{config.width}")


if __name__ == "__main__":
    main()
