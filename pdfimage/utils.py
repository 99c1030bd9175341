from __future__ import annotations

import asyncio
import logging
import os
import signal
from dataclasses import dataclass

SHELL = "/bin/sh"
TIMEOUT_RETURNCODE = 124


@dataclass
class CmdResult:
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


async def run_shell(cmd: str, timeout_sec: float | None = None) -> CmdResult:
    """Run a command line through /bin/sh, returning stdout/stderr as bytes.

    A timeout kills the process and reports exit code 124. If the calling
    task is cancelled the process is killed before the cancellation
    propagates. OSError from spawning the shell is left to the caller.
    """
    logging.debug("Running: %s", cmd)
    proc = await asyncio.create_subprocess_exec(
        SHELL,
        "-c",
        cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        start_new_session=True,
    )

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout_sec)
    except asyncio.TimeoutError:
        await _kill(proc)
        return CmdResult(
            returncode=TIMEOUT_RETURNCODE,
            stdout=b"",
            stderr=f"Timeout after {timeout_sec}s".encode(),
        )
    except asyncio.CancelledError:
        await _kill(proc)
        raise

    return CmdResult(returncode=proc.returncode or 0, stdout=stdout or b"", stderr=stderr or b"")


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is not None:
        return
    try:
        # The shell may have forked the tool; kill the whole group.
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    await proc.wait()


def human_bytes(n: int) -> str:
    step = 1024.0
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    v = float(n)
    while v >= step and i < len(units) - 1:
        v /= step
        i += 1
    return f"{v:.2f} {units[i]}"
