from pathlib import Path

import pytest

from pdfimage import combine
from pdfimage.config import ConversionJob
from pdfimage.errors import CombineError


def make_pages(directory: Path, count: int) -> list[Path]:
    pages = []
    for i in range(count):
        p = directory / f"test-{i}.png"
        p.write_bytes(b"img")
        pages.append(p)
    return pages


@pytest.mark.asyncio
async def test_combine_writes_output_and_removes_pages(fake_tools, pdf_file: Path):
    job = ConversionJob(source_path=pdf_file)
    pages = make_pages(pdf_file.parent, 3)

    out = await combine.combine_images(job, pages)

    assert out == pdf_file.parent / "test.png"
    assert out.exists()
    assert not any(p.exists() for p in pages)
    [call] = fake_tools.calls("convert")
    assert call == "convert -append " + " ".join(str(p) for p in pages) + f" {out}"


@pytest.mark.asyncio
async def test_combine_failure_keeps_pages(fake_tools, pdf_file: Path):
    (fake_tools.bin_dir / "convert").write_text("#!/bin/sh\necho nope >&2\nexit 1\n")
    job = ConversionJob(source_path=pdf_file)
    pages = make_pages(pdf_file.parent, 2)

    with pytest.raises(CombineError) as exc:
        await combine.combine_images(job, pages)

    assert exc.value.returncode == 1
    assert exc.value.stderr.strip() == "nope"
    assert all(p.exists() for p in pages)


@pytest.mark.asyncio
async def test_cleanup_failure_is_not_fatal(fake_tools, pdf_file: Path, caplog: pytest.LogCaptureFixture):
    job = ConversionJob(source_path=pdf_file)
    pages = make_pages(pdf_file.parent, 2)
    # The fake tool only needs the path string; the file itself is gone.
    gone = pdf_file.parent / "test-9.png"

    with caplog.at_level("WARNING"):
        out = await combine.combine_images(job, [*pages, gone])

    assert out.exists()
    assert not any(p.exists() for p in pages)
    assert "Failed to remove intermediate image" in caplog.text


@pytest.mark.asyncio
async def test_combine_requires_images(pdf_file: Path):
    with pytest.raises(ValueError):
        await combine.combine_images(ConversionJob(source_path=pdf_file), [])
