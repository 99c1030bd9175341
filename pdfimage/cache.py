from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from .errors import SourceMissingError


async def _stat(path: Path) -> os.stat_result | None:
    try:
        return await asyncio.to_thread(os.stat, path)
    except FileNotFoundError:
        return None


async def needs_conversion(page_path: Path, source_path: Path) -> bool:
    """Return True when ``page_path`` is missing or older than ``source_path``.

    An image with the same mtime as the source is reused.
    """
    image_stat = await _stat(page_path)
    if image_stat is None:
        return True

    source_stat = await _stat(source_path)
    if source_stat is None:
        raise SourceMissingError(source_path)

    if image_stat.st_mtime_ns < source_stat.st_mtime_ns:
        logging.debug("Stale image %s, source %s is newer", page_path, source_path)
        return True
    logging.debug("Reusing %s", page_path)
    return False
