from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from .commands import combine_command
from .config import ConversionJob
from .errors import CombineError
from .paths import combined_path
from .utils import run_shell


async def _remove_intermediates(image_paths: Sequence[Path]) -> None:
    """Delete per-page images after a combine. Failures are logged, not raised."""
    results = await asyncio.gather(
        *(asyncio.to_thread(Path(p).unlink) for p in image_paths),
        return_exceptions=True,
    )
    for path, res in zip(image_paths, results):
        if isinstance(res, Exception):
            logging.warning("Failed to remove intermediate image %s: %s", path, repr(res))


async def combine_images(job: ConversionJob, image_paths: Sequence[str | Path]) -> Path:
    """Stack ``image_paths`` top to bottom into the combined image.

    The inputs are left in place if the combine fails.
    """
    if not image_paths:
        raise ValueError("combine_images needs at least one image")
    paths = [Path(p) for p in image_paths]
    cmd = combine_command(job, paths)
    try:
        res = await run_shell(cmd, timeout_sec=job.command_timeout_sec)
    except OSError as e:
        raise CombineError(error=e) from e
    if not res.ok:
        logging.error("Combine failed [exit %s]: %s", res.returncode, cmd)
        raise CombineError(
            stdout=res.stdout_text(),
            stderr=res.stderr_text(),
            returncode=res.returncode,
        )

    out = combined_path(job)
    logging.info("Combined %d page(s) into %s", len(paths), out)
    await _remove_intermediates(paths)
    return out
