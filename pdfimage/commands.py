"""Command lines for the external tools.

Paths are escaped and wrapped in double quotes, except the images given to
``-append``, which are escaped and must each be one shell word. Option flags
and values are emitted as is, having already passed
``validate_command_break`` in ConversionJob.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from .config import ConversionJob
from .errors import InvalidInputError
from .paths import combined_path, page_path
from .security import is_single_word

INFO_TOOL = "pdfinfo"
CONVERT_TOOL = "convert"
GM_CONVERT_TOOL = "gm convert"

# Still special inside double quotes. Joining checked parts can produce them
# ("test$" + "-0.png" contains "$-"), so paths are escaped on the way out.
_SPECIAL_IN_QUOTES = re.compile(r'([\\"$`])')


def _escape(path: str | Path) -> str:
    return _SPECIAL_IN_QUOTES.sub(r"\\\1", str(path))


def engine(job: ConversionJob) -> str:
    return GM_CONVERT_TOOL if job.graphicsmagick else CONVERT_TOOL


def info_command(job: ConversionJob) -> str:
    return f'{INFO_TOOL} "{_escape(job.source_path)}"'


def convert_options(job: ConversionJob) -> str:
    """Render options sorted by flag so the command does not depend on dict order."""
    parts = []
    for flag in sorted(job.convert_options):
        value = job.convert_options[flag]
        parts.append(flag if value is None else f"{flag} {value}")
    return " ".join(parts)


def convert_page_command(job: ConversionJob, page: int) -> str:
    options = convert_options(job)
    prefix = f"{options} " if options else ""
    source = _escape(job.source_path)
    return f'{engine(job)} {prefix}"{source}[{page}]" "{_escape(page_path(job, page))}"'


def combine_command(job: ConversionJob, image_paths: Sequence[str | Path]) -> str:
    escaped = [_escape(p) for p in image_paths]
    if not all(is_single_word(image) for image in escaped):
        raise InvalidInputError()
    return f'{engine(job)} -append {" ".join(escaped)} "{_escape(combined_path(job))}"'
