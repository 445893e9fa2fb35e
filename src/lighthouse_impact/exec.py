from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from .cancellation import CancellationContext
from .errors import CommandError, OperationCancelled

LineSink = Callable[[str], None]

# Lighthouse JSON can carry base64 screenshots on a single line.
STREAM_LIMIT = 64 * 1024 * 1024


@dataclass(frozen=True)
class CommandResult:
    command: str
    returncode: int
    stdout: str
    stderr: str


async def _pump(stream: Optional[asyncio.StreamReader], sink: Optional[LineSink], captured: List[str]) -> None:
    if stream is None:
        return
    while True:
        line_b = await stream.readline()
        if not line_b:
            break
        line = line_b.decode("utf-8", errors="replace")
        captured.append(line)
        if sink is not None:
            sink(line.rstrip("\r\n"))


async def run_command(
    command: str,
    cwd: Union[str, Path],
    *,
    on_stdout: Optional[LineSink] = None,
    on_stderr: Optional[LineSink] = None,
    cancellation: Optional[CancellationContext] = None,
) -> CommandResult:
    """
    Run a shell command in ``cwd``, streaming each output line to the sinks.

    Raises CommandError (with captured stderr) on a non-zero exit and
    OperationCancelled if cancellation fires while the process runs; the
    process is killed in that case.
    """
    if cancellation is not None:
        cancellation.raise_if_cancelled()

    proc = await asyncio.create_subprocess_shell(
        command,
        cwd=str(cwd),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        limit=STREAM_LIMIT,
    )

    stdout_lines: List[str] = []
    stderr_lines: List[str] = []

    async def _wait() -> int:
        await asyncio.gather(
            _pump(proc.stdout, on_stdout, stdout_lines),
            _pump(proc.stderr, on_stderr, stderr_lines),
        )
        return await proc.wait()

    try:
        if cancellation is not None:
            returncode = await cancellation.guard(_wait())
        else:
            returncode = await _wait()
    except OperationCancelled:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()
        raise

    result = CommandResult(
        command=command,
        returncode=int(returncode or 0),
        stdout="".join(stdout_lines),
        stderr="".join(stderr_lines),
    )
    if result.returncode != 0:
        raise CommandError(command, result.returncode, result.stderr)
    return result
