"""AsyncProcessRunner — real implementation of IProcessRunner on asyncio."""

from __future__ import annotations

import asyncio
import logging

import simstation.log  # registers TRACE level and logger.trace()
from simstation.errors import ProcessLaunchError, ProcessStderrError
from simstation.log import format_argv, truncate
from simstation.platform.process_adapter import CommandDescriptor, IProcessRunner, ProcessResult

logger = logging.getLogger(__name__)


class AsyncProcessRunner(IProcessRunner):
    """Launches child processes and drains both output pipes concurrently.

    Reading stdout to EOF before touching stderr (or the other way round)
    deadlocks as soon as the child fills the unread pipe's buffer, so each
    stream gets its own reader task, and both are started before waiting
    for the process to exit.
    """

    def __init__(self, debug: bool = False) -> None:
        self.debug = debug

    async def run(self, descriptor: CommandDescriptor) -> ProcessResult:
        logger.trace("Launching: %s", format_argv(descriptor.argv))  # type: ignore[attr-defined]
        try:
            process = await asyncio.create_subprocess_exec(
                descriptor.executable,
                *descriptor.arguments,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise ProcessLaunchError(descriptor.executable, "executable not found") from None
        except PermissionError:
            raise ProcessLaunchError(descriptor.executable, "permission denied") from None
        except OSError as exc:
            raise ProcessLaunchError(descriptor.executable, str(exc)) from exc

        stdout_task = asyncio.ensure_future(process.stdout.read())
        stderr_task = asyncio.ensure_future(process.stderr.read())

        try:
            returncode = await process.wait()
            stdout, stderr = await asyncio.gather(stdout_task, stderr_task)
        except asyncio.CancelledError:
            await self._terminate(process, stdout_task, stderr_task)
            raise

        logger.trace(  # type: ignore[attr-defined]
            "Finished: %s (status=%d, stdout=%d bytes, stderr=%d bytes)",
            descriptor.executable, returncode, len(stdout), len(stderr),
        )

        if stderr:
            message = stderr.decode("utf-8", errors="replace")
            if self.debug:
                logger.debug("stderr from %s: %s", format_argv(descriptor.argv), truncate(message))
            raise ProcessStderrError(message, returncode)

        return ProcessResult(stdout=stdout, returncode=returncode)

    @staticmethod
    async def _terminate(process, *readers: asyncio.Future) -> None:
        """Kill a child whose caller was cancelled and reap it."""
        for reader in readers:
            reader.cancel()
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
        try:
            await asyncio.shield(process.wait())
        except asyncio.CancelledError:
            pass
