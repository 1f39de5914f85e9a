"""CLI entry point for NoiseForge."""

import argparse
import logging
import sys

from . import FileSink, NoiseKind, NoiseRequest, ValidationError, rasterize


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate a grayscale noise texture"
    )
    parser.add_argument(
        "kind", choices=[k.value for k in NoiseKind],
        help="Noise kind"
    )
    parser.add_argument(
        "--width", "-W", type=int, default=256,
        help="Output image width in pixels (default: 256)"
    )
    parser.add_argument(
        "--height", "-H", type=int, default=256,
        help="Output image height in pixels (default: 256)"
    )
    parser.add_argument(
        "--seed", "-s", type=int, default=0,
        help="Random seed for reproducible generation (default: 0)"
    )
    parser.add_argument(
        "--octaves", "-O", type=int, default=1,
        help="Number of fractal octaves (default: 1)"
    )
    parser.add_argument(
        "--frequency", "-f", type=float, default=0.05,
        help="Base frequency, non-zero (default: 0.05)"
    )
    parser.add_argument(
        "--persistence", type=float, default=0.5,
        help="Amplitude multiplier per octave (default: 0.5)"
    )
    parser.add_argument(
        "--lacunarity", type=float, default=2.0,
        help="Frequency multiplier per octave (default: 2.0)"
    )
    parser.add_argument(
        "--workers", "-j", type=int, default=1,
        help="Row bands evaluated in parallel (default: 1)"
    )
    parser.add_argument(
        "--output", "-o", default="noise.png",
        help="Output file path (default: noise.png)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    request = NoiseRequest(
        kind=args.kind,
        width=args.width,
        height=args.height,
        seed=args.seed,
        octaves=args.octaves,
        frequency=args.frequency,
        persistence=args.persistence,
        lacunarity=args.lacunarity,
        workers=args.workers,
    )

    try:
        buffer = rasterize(request)
    except ValidationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if not FileSink(args.output)(buffer, request.width, request.height):
        return 1

    print(f"Saved {request.kind.value} noise ({request.width}x"
          f"{request.height}) to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
