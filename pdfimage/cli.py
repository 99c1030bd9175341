from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from . import __version__
from .config import Settings, load_settings
from .converter import PDFImage
from .errors import CommandError, InvalidInputError, PDFImageError
from .utils import human_bytes


def _parse_option(raw: str) -> tuple[str, str | None]:
    flag, sep, value = raw.partition("=")
    if not flag:
        raise argparse.ArgumentTypeError(f"empty option flag in {raw!r}")
    return flag, (value if sep else None)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pdf-image",
        description="Convert PDF pages to images with ImageMagick or GraphicsMagick.",
    )
    p.add_argument("source", help="PDF file to convert")
    p.add_argument("-o", "--output-dir", help="directory for images (default: next to the PDF)")
    p.add_argument("-b", "--base-name", help="image file name prefix (default: PDF name)")
    p.add_argument("-e", "--extension", help="image format extension (default: png)")
    p.add_argument(
        "-O",
        "--option",
        dest="options",
        action="append",
        type=_parse_option,
        default=[],
        metavar="FLAG[=VALUE]",
        help="converter option, e.g. -O-density=300 or -O-trim; repeatable",
    )
    p.add_argument("--gm", action="store_true", help="use GraphicsMagick instead of ImageMagick")
    p.add_argument("--combine", action="store_true", help="append all pages into one image")
    p.add_argument("-j", "--jobs", type=int, help="max pages converted at once")
    p.add_argument("--timeout", type=float, help="per-command timeout in seconds")
    p.add_argument("--info", action="store_true", help="print PDF information and exit")
    p.add_argument("--dry-run", action="store_true", help="print commands without running them")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def setup_logging(settings: Settings) -> None:
    # Console always; optional rotating file
    log_format = "%(asctime)s %(levelname)s %(name)s %(message)s"
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=log_format)
    if settings.log_file:
        try:
            settings.log_file.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                settings.log_file,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backups,
                encoding="utf-8",
            )
            fh.setLevel(level)
            fh.setFormatter(logging.Formatter(log_format))
            logging.getLogger().addHandler(fh)
        except Exception:
            logging.exception("Failed to set up file logging")


def make_converter(args: argparse.Namespace, settings: Settings) -> PDFImage:
    return PDFImage(
        args.source,
        output_directory=args.output_dir,
        base_name=args.base_name,
        extension=args.extension,
        convert_options=dict(args.options),
        graphicsmagick=args.gm,
        combine=args.combine,
        max_concurrency=args.jobs or settings.max_concurrency,
        command_timeout_sec=args.timeout if args.timeout is not None else settings.command_timeout_sec,
    )


async def main(args: argparse.Namespace, settings: Settings) -> int:
    pdf = make_converter(args, settings)

    if args.info:
        for key, value in (await pdf.get_info()).items():
            print(f"{key}: {value}")
        return 0

    if args.dry_run:
        print(pdf.info_command())
        pages = await pdf.number_of_pages()
        for page in range(pages):
            print(pdf.convert_page_command(page))
        if pdf.job.combine and pages:
            print(pdf.combine_command([pdf.page_path(i) for i in range(pages)]))
        return 0

    result = await pdf.convert_file()
    outputs = [result] if isinstance(result, Path) else result
    for path in outputs:
        size = path.stat().st_size if path.exists() else 0
        print(f"{path} ({human_bytes(size)})")
    return 0


def run(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
    except (RuntimeError, ValidationError) as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 2
    setup_logging(settings)

    try:
        return asyncio.run(main(args, settings))
    except (InvalidInputError, ValidationError) as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 2
    except CommandError as e:
        print(f"{e.message} (exit {e.returncode})", file=sys.stderr)
        if e.stderr:
            print(e.stderr.rstrip(), file=sys.stderr)
        return 1
    except PDFImageError as e:
        print(e.message, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(run())
