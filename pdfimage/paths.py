from __future__ import annotations

from pathlib import Path

from .config import ConversionJob


def page_path(job: ConversionJob, page: int) -> Path:
    """Output image for ``page``: ``<dir>/<base>-<page>.<ext>``."""
    return job.output_directory / f"{job.base_name}-{page}.{job.extension}"


def combined_path(job: ConversionJob) -> Path:
    """Output image for the whole document: ``<dir>/<base>.<ext>``."""
    return job.output_directory / f"{job.base_name}.{job.extension}"
