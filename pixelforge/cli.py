"""Command line entry points: run the service or submit images to it."""

import argparse
import logging
import sys
from typing import List, Optional

from pixelforge.client.config import default_resolvers, resolve_api_url
from pixelforge.client.submission import SubmissionController
from pixelforge.core.config import Settings
from pixelforge.core.exceptions import TransportError
from pixelforge.core.logging_config import setup_logging
from pixelforge.schemas.conversion import CompressionLevel

logger = logging.getLogger(__name__)


def serve(args: argparse.Namespace) -> int:
    """Run the conversion service under uvicorn."""
    import uvicorn

    uvicorn.run(
        "pixelforge.main:app", host=args.host, port=args.port, reload=args.reload
    )
    return 0


def convert(args: argparse.Namespace) -> int:
    """Stage the given images, submit them and report where the PDF went."""
    api_url = args.api_url or resolve_api_url(default_resolvers())
    controller = SubmissionController(api_url=api_url)
    controller.select_files(args.images)
    controller.set_compression_level(args.compression)
    controller.set_filename(args.filename)

    if not controller.can_submit:
        print("No images selected", file=sys.stderr)
        return 1

    try:
        path = controller.submit(args.output_dir)
    except TransportError as e:
        print(str(e), file=sys.stderr)
        return 1

    print(path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    settings = Settings()

    parser = argparse.ArgumentParser(
        prog="pixelforge", description="Turn a set of images into one PDF."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", default=settings.HOST)
    serve_parser.add_argument("--port", type=int, default=settings.PORT)
    serve_parser.add_argument(
        "--reload",
        action=argparse.BooleanOptionalAction,
        default=settings.ENVIRONMENT == "development",
        help="Restart on code changes",
    )
    serve_parser.set_defaults(func=serve)

    convert_parser = subparsers.add_parser(
        "convert", help="Send images to the service and save the PDF"
    )
    convert_parser.add_argument("images", nargs="+", help="Image files, in page order")
    convert_parser.add_argument(
        "--compression",
        default=CompressionLevel.NORMAL.value,
        choices=[level.value for level in CompressionLevel],
    )
    convert_parser.add_argument("--filename", default="converted")
    convert_parser.add_argument("--output-dir", default=".")
    convert_parser.add_argument(
        "--api-url", help="Service base URL (overrides runtime config and env)"
    )
    convert_parser.set_defaults(func=convert)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("WARNING" if args.command == "convert" else None)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
