import asyncio
import time

import pytest

from pdfimage.utils import CmdResult, human_bytes, run_shell


@pytest.mark.asyncio
async def test_run_shell_echo():
    res = await run_shell("echo hello")
    assert res.ok
    assert res.returncode == 0
    assert res.stdout_text().strip() == "hello"


@pytest.mark.asyncio
async def test_run_shell_captures_failure():
    res = await run_shell("echo out; echo err >&2; exit 3")
    assert not res.ok
    assert res.returncode == 3
    assert res.stdout_text().strip() == "out"
    assert res.stderr_text().strip() == "err"


@pytest.mark.asyncio
async def test_run_shell_timeout():
    # sleep should exist on Linux/macOS
    res = await run_shell("sleep 2", timeout_sec=0.3)
    assert res.returncode == 124
    assert b"Timeout after" in res.stderr


@pytest.mark.asyncio
async def test_run_shell_cancel_kills_process():
    task = asyncio.create_task(run_shell("sleep 5; echo late"))
    await asyncio.sleep(0.2)
    started = time.monotonic()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert time.monotonic() - started < 2


def test_cmd_result_decodes_invalid_utf8():
    res = CmdResult(returncode=0, stdout=b"\xffok", stderr=b"")
    assert res.stdout_text().endswith("ok")


def test_human_bytes():
    assert human_bytes(0) == "0.00 B"
    assert human_bytes(1023).endswith("B")
    assert human_bytes(1024).endswith("KB")
    assert human_bytes(1024 * 1024).endswith("MB")
