"""Document metadata from ``pdfinfo``."""

from __future__ import annotations

import logging
import re

from .commands import info_command
from .config import ConversionJob
from .errors import InfoQueryError, MissingFieldError, PageCountParseError
from .utils import run_shell

_INFO_LINE = re.compile(r"^(.*?):[ \t]*(.*)$")


def parse_info_output(output: str) -> dict[str, str]:
    """Parse ``Key: Value`` lines; other lines are ignored, later keys win."""
    info: dict[str, str] = {}
    for line in output.split("\n"):
        m = _INFO_LINE.match(line)
        if m:
            info[m.group(1)] = m.group(2)
    return info


async def get_info(job: ConversionJob) -> dict[str, str]:
    cmd = info_command(job)
    try:
        res = await run_shell(cmd, timeout_sec=job.command_timeout_sec)
    except OSError as e:
        raise InfoQueryError(error=e) from e
    if not res.ok:
        logging.error("Info query failed [exit %s]: %s", res.returncode, cmd)
        raise InfoQueryError(
            stdout=res.stdout_text(),
            stderr=res.stderr_text(),
            returncode=res.returncode,
        )
    return parse_info_output(res.stdout_text())


async def number_of_pages(job: ConversionJob) -> int:
    info = await get_info(job)
    if "Pages" not in info:
        raise MissingFieldError("Pages")
    raw = info["Pages"]
    try:
        pages = int(raw.strip())
    except ValueError:
        raise PageCountParseError(raw) from None
    if pages < 0:
        raise PageCountParseError(raw)
    return pages
