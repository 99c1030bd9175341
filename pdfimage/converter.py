from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from . import commands, paths
from .cache import needs_conversion
from .combine import combine_images
from .config import ConversionJob
from .errors import PageConversionError
from .info import get_info, number_of_pages
from .utils import run_shell


class PDFImage:
    """Render the pages of a PDF to images with ImageMagick or GraphicsMagick.

    Pages are converted concurrently (at most ``job.max_concurrency`` at a
    time). A page image newer than the PDF is reused instead of re-rendered.
    """

    def __init__(self, source_path: str | Path, **options: Any) -> None:
        self.job = ConversionJob(source_path=source_path, **options)

    @classmethod
    def from_job(cls, job: ConversionJob) -> PDFImage:
        self = cls.__new__(cls)
        self.job = job
        return self

    # Paths and command lines, no I/O

    def page_path(self, page: int) -> Path:
        return paths.page_path(self.job, page)

    def combined_path(self) -> Path:
        return paths.combined_path(self.job)

    def info_command(self) -> str:
        return commands.info_command(self.job)

    def convert_page_command(self, page: int) -> str:
        return commands.convert_page_command(self.job, page)

    def combine_command(self, image_paths: Sequence[str | Path]) -> str:
        return commands.combine_command(self.job, image_paths)

    # Operations

    async def get_info(self) -> dict[str, str]:
        return await get_info(self.job)

    async def number_of_pages(self) -> int:
        return await number_of_pages(self.job)

    async def convert_page(self, page: int) -> Path:
        out = self.page_path(page)
        if not await needs_conversion(out, self.job.source_path):
            return out

        cmd = self.convert_page_command(page)
        try:
            res = await run_shell(cmd, timeout_sec=self.job.command_timeout_sec)
        except OSError as e:
            raise PageConversionError(page=page, error=e) from e
        if not res.ok:
            logging.error("Page %d failed [exit %s]: %s", page, res.returncode, cmd)
            raise PageConversionError(
                page=page,
                stdout=res.stdout_text(),
                stderr=res.stderr_text(),
                returncode=res.returncode,
            )
        logging.info("Converted page %d -> %s", page, out)
        return out

    async def combine_images(self, image_paths: Sequence[str | Path]) -> Path:
        return await combine_images(self.job, image_paths)

    async def convert_file(self) -> list[Path] | Path:
        """Convert every page; return the page images, or the combined image.

        The first failing page cancels the pages still running and its error
        is raised. Images already written by other pages stay on disk.
        """
        total = await self.number_of_pages()
        logging.info("Converting %d page(s) of %s", total, self.job.source_path)

        results: list[Path | None] = [None] * total
        limit = asyncio.Semaphore(self.job.max_concurrency)

        async def run(page: int) -> None:
            async with limit:
                results[page] = await self.convert_page(page)

        try:
            async with asyncio.TaskGroup() as tg:
                for page in range(total):
                    tg.create_task(run(page))
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None

        image_paths = [p for p in results if p is not None]
        if not self.job.combine or not image_paths:
            return image_paths
        return await self.combine_images(image_paths)
