#!/usr/bin/env python3
"""Thin CLI to compose a print layout without the web UI.

Stays a tiny wrapper over library functions with meaningful exit codes.
"""

import argparse
import logging
import mimetypes
from pathlib import Path

from .constants import LayoutConstants
from .errors import LayoutError
from .ingest import UploadedFile
from .paper import ORIENTATIONS, PAPER_SIZES, CanvasConfig
from .render import export_filename, validate_format
from .session import LayoutSession
from .units import mm_to_px

logger = logging.getLogger(__name__)


def _parse_point_mm(value: str) -> tuple[float, float]:
    try:
        x, y = (float(part) for part in value.split(","))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected X,Y in mm, got {value!r}") from exc
    return x, y


def _read_upload(path: Path) -> UploadedFile:
    media_type, _ = mimetypes.guess_type(path.name)
    return UploadedFile(path.name, media_type or "application/octet-stream", path.read_bytes())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compose photos onto an L/2L print layout")
    parser.add_argument("images", nargs="+", type=Path, help=f"up to {LayoutConstants.MAX_IMAGES} image files")
    parser.add_argument("--paper", choices=sorted(PAPER_SIZES), default=LayoutConstants.DEFAULT_PAPER)
    parser.add_argument("--orientation", choices=ORIENTATIONS, default=LayoutConstants.DEFAULT_ORIENTATION)
    parser.add_argument("--format", dest="fmt", default="png", help="png or jpeg")
    parser.add_argument(
        "--at",
        action="append",
        type=_parse_point_mm,
        default=[],
        metavar="X,Y",
        help="top-left position in mm for each image, in order",
    )
    parser.add_argument("-o", "--output", type=Path, help="output file (default layout_image.<ext>)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        fmt = validate_format(args.fmt)
        session = LayoutSession(CanvasConfig(args.paper, args.orientation))
        placed = session.add_files([_read_upload(path) for path in args.images])
        for image, (x_mm, y_mm) in zip(placed, args.at):
            session.move_image(image.id, mm_to_px(x_mm), mm_to_px(y_mm))
        output = args.output or Path(export_filename(fmt))
        output.write_bytes(session.export(fmt))
    except (LayoutError, OSError) as e:
        print(f"error: {e}")
        return 2

    for warning in session.warnings():
        print(f"warning: {warning}")
    print(str(output))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
