# pwv_gateway/executors/vault_cli.py
"""
Vault CLI (clipasswordsdk) invoker

Spawns the CLI once per request, races its completion against the configured
timeout and reports a ProcessOutcome. Classification of the outcome into an
HTTP response happens elsewhere.
"""

import asyncio
import time
from datetime import timedelta
from typing import Dict, List, Mapping, Optional

from pwv_gateway.core.constants import (
    CLI_FOLDER,
    CLI_OPERATION,
    CLI_OUTPUT_FIELD,
    CLI_OUTPUT_FLAG,
    CLI_PARAM_FLAG,
    FailureReason,
)
from pwv_gateway.core.logging import get_logger
from pwv_gateway.executors.base import BaseInvoker, InvocationSpec, ProcessOutcome

logger = get_logger(__name__)


def build_arguments(spec: InvocationSpec) -> List[str]:
    """Argument vector for GetPassword. Token order is fixed by the CLI."""
    return [
        CLI_OPERATION,
        CLI_PARAM_FLAG, f"AppDescs.AppID={spec.application_id}",
        CLI_PARAM_FLAG, f"Query=Safe={spec.safe_name};Folder={CLI_FOLDER};Object={spec.account_name}",
        CLI_OUTPUT_FLAG, CLI_OUTPUT_FIELD,
    ]


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace").strip()


def _since(start: float) -> timedelta:
    return timedelta(seconds=time.monotonic() - start)


async def _pump(stream: asyncio.StreamReader, buffer: bytearray) -> None:
    """Copy a child pipe into a buffer until EOF"""
    while True:
        chunk = await stream.read(4096)
        if not chunk:
            return
        buffer.extend(chunk)


class VaultCLIInvoker(BaseInvoker):
    """Runs the vault CLI as a child process with a hard timeout"""

    def __init__(self, env: Optional[Mapping[str, str]] = None):
        """
        Args:
            env: Explicit environment for the child. None inherits the
                environment of this process unmodified, which the CLI needs
                for its own runtime.
        """
        self.env: Optional[Dict[str, str]] = dict(env) if env is not None else None

    async def invoke(self, spec: InvocationSpec) -> ProcessOutcome:
        args = build_arguments(spec)
        logger.info(f"Exec: {[spec.executable_path, *args]}")

        start = time.monotonic()
        try:
            process = await asyncio.create_subprocess_exec(
                spec.executable_path,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self.env,
            )
        except (OSError, ValueError) as e:
            logger.error(f"Failed to start vault CLI {spec.executable_path!r}: {e}")
            return ProcessOutcome(
                succeeded=False,
                failure_reason=FailureReason.SPAWN_ERROR,
                detail=str(e),
                elapsed=_since(start),
            )

        stdout_buf, stderr_buf = bytearray(), bytearray()
        pumps = [
            asyncio.create_task(_pump(process.stdout, stdout_buf)),
            asyncio.create_task(_pump(process.stderr, stderr_buf)),
        ]
        # Background wait-task; the timer is the timeout of asyncio.wait
        waiter = asyncio.create_task(self._wait(process, pumps))
        try:
            done, _ = await asyncio.wait({waiter}, timeout=spec.timeout_millis / 1000)
        except asyncio.CancelledError:
            await self._release(process, [waiter, *pumps])
            raise

        if waiter in done:
            return self._completed(waiter, stdout_buf, stderr_buf, start)

        elapsed = _since(start)
        secondary_reason = None
        try:
            process.kill()
        except OSError as e:
            # Timeout stays the primary reason; the child may outlive this request
            secondary_reason = FailureReason.KILL_ERROR
            logger.error(f"failed to kill vault CLI (pid {process.pid}) after timeout: {e}")

        await self._release(process, [waiter, *pumps])

        # Exit code is not collected; whatever was read before the timer fired is kept
        return ProcessOutcome(
            succeeded=False,
            stdout=_decode(bytes(stdout_buf)),
            stderr=_decode(bytes(stderr_buf)),
            failure_reason=FailureReason.TIMEOUT,
            secondary_reason=secondary_reason,
            detail=f"no result within {spec.timeout_millis} ms",
            elapsed=elapsed,
        )

    @staticmethod
    async def _wait(process: asyncio.subprocess.Process, pumps: List[asyncio.Task]) -> int:
        await asyncio.gather(*pumps)
        return await process.wait()

    def _completed(
        self,
        waiter: "asyncio.Task[int]",
        stdout_buf: bytearray,
        stderr_buf: bytearray,
        start: float,
    ) -> ProcessOutcome:
        try:
            exit_code = waiter.result()
        except OSError as e:
            logger.error(f"Waiting for vault CLI failed: {e}")
            return ProcessOutcome(
                succeeded=False,
                failure_reason=FailureReason.WAIT_ERROR,
                detail=str(e),
                elapsed=_since(start),
            )

        stdout = _decode(bytes(stdout_buf))
        stderr = _decode(bytes(stderr_buf))
        if exit_code == 0:
            return ProcessOutcome(
                succeeded=True,
                stdout=stdout,
                stderr=stderr,
                exit_code=0,
                elapsed=_since(start),
            )

        if exit_code < 0:
            detail = f"terminated by signal {-exit_code}"
        else:
            detail = f"exit status {exit_code}"

        return ProcessOutcome(
            succeeded=False,
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
            failure_reason=FailureReason.NON_ZERO_EXIT,
            detail=detail,
            elapsed=_since(start),
        )

    @staticmethod
    async def _release(process: asyncio.subprocess.Process, tasks: List[asyncio.Task]) -> None:
        """Stop reading and close the pipes, even when a grandchild still holds them"""
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        # Closing the transport also kills the child if it is still running
        process._transport.close()
