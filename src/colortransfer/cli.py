"""
Command line interface for colortransfer.

Two programs share this module:

  color-transfer <source> <target> <output>
  colorization   <source> <target> <output>

Nothing is written unless the whole run succeeds.
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .colorization import DEFAULT_PATCH_SIZE, DEFAULT_SAMPLES
from .colorspaces import DEFAULT_COLORSPACE, ColorspaceManager
from .config import create_transfer_config
from .io_utils import load_image
from .pipeline import ColorTransferPipeline


def _build_parser(prog: str, description: str, colorization: bool) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {prog} source.ppm target.ppm output.ppm
  {prog} source.png target.png output.png --colorspace LABE -v
""",
    )

    parser.add_argument("source", help="Image supplying the colors")
    parser.add_argument("target", help="Image to recolor")
    parser.add_argument("output", help="Output image path")

    parser.add_argument(
        "-c",
        "--colorspace",
        default=DEFAULT_COLORSPACE,
        choices=ColorspaceManager().list_available(),
        help=f"Decorrelated colorspace (default: {DEFAULT_COLORSPACE})",
    )
    parser.add_argument(
        "--display-min",
        type=float,
        default=0.0,
        help="Lowest output component (default: 0)",
    )
    parser.add_argument(
        "--display-max",
        type=float,
        default=None,
        help="Highest output component (default: maximum of the image type)",
    )

    if colorization:
        sampling_group = parser.add_argument_group("Sampling")
        sampling_group.add_argument(
            "-n",
            "--samples",
            type=int,
            default=DEFAULT_SAMPLES,
            help=f"Number of source samples (default: {DEFAULT_SAMPLES})",
        )
        sampling_group.add_argument(
            "--patch-size",
            type=int,
            default=DEFAULT_PATCH_SIZE,
            help=f"Half-width of the luminance window (default: {DEFAULT_PATCH_SIZE})",
        )
        sampling_group.add_argument(
            "--seed",
            type=int,
            default=None,
            help="Random seed for sample drawing",
        )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    return parser


def _run(args: argparse.Namespace, colorization: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    source_path = Path(args.source)
    target_path = Path(args.target)
    output_path = Path(args.output)
    for path in (source_path, target_path):
        if not path.exists():
            print(f"Error: Input file '{path}' not found", file=sys.stderr)
            sys.exit(1)

    try:
        overrides = {
            "colorspace": args.colorspace,
            "display_min": args.display_min,
            "display_max": args.display_max,
        }
        if colorization:
            overrides.update(samples=args.samples, patch_size=args.patch_size, seed=args.seed)
        config = create_transfer_config(**overrides)

        source = load_image(source_path)
        target = load_image(target_path)

        pipeline = ColorTransferPipeline(config)
        if colorization:
            result = pipeline.colorize(source, target)
        else:
            result = pipeline.transfer(source, target)

        result.save(str(output_path))

        print(f"Successfully processed '{target_path}' -> '{output_path}'")
        if args.verbose:
            print(f"Mode: {result.mode}")
            print(f"Parameters: {result.parameters}")
            print(f"Extent: {result.extent.as_dict()}")

    except Exception as e:
        print(f"Error processing image: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


def transfer_main(argv: list[str] | None = None):
    """Entry point of ``color-transfer``."""
    parser = _build_parser(
        "color-transfer",
        "Reinhard color transfer: give <target> the color statistics of <source>",
        colorization=False,
    )
    _run(parser.parse_args(argv), colorization=False)


def colorization_main(argv: list[str] | None = None):
    """Entry point of ``colorization``."""
    parser = _build_parser(
        "colorization",
        "Sample-based colorization: give <target> the chrominance of matching <source> pixels",
        colorization=True,
    )
    _run(parser.parse_args(argv), colorization=True)


if __name__ == "__main__":
    transfer_main()
