import asyncio
import logging
import shlex
from typing import List

from deploy_agent.domain.errors import ExternalToolError
from deploy_agent.domain.ports import ComposeRunner, MaterializeOutcome, MaterializeRequest

logger = logging.getLogger(__name__)


class ComposeCLIRunner(ComposeRunner):
    """
    Runs `<compose> -f <file> -p <project> up -d <service>` in the project directory.

    The child is bounded by `timeout_s`; if the timeout fires or the awaiting
    task is cancelled, the process is killed and reaped before returning.
    """

    def __init__(self, command: str = "docker compose", timeout_s: float = 300.0):
        self.command = shlex.split(command)
        self.timeout_s = timeout_s

    def build_args(self, request: MaterializeRequest) -> List[str]:
        return [
            *self.command,
            "-f", request.compose_filename,
            "-p", request.project,
            "up", "-d", request.service,
        ]

    async def materialize(self, request: MaterializeRequest) -> MaterializeOutcome:
        args = self.build_args(request)
        logger.info("[COMPOSE] %s (cwd=%s)", " ".join(args), request.project)
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                cwd=str(request.project_path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except FileNotFoundError as exc:
            raise ExternalToolError(f"compose executable not found: {self.command[0]}") from exc

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            await self._kill(process)
            raise ExternalToolError(
                f"docker compose timed out after {self.timeout_s:g}s "
                f"starting service {request.service} in project {request.project}"
            )
        except asyncio.CancelledError:
            await self._kill(process)
            raise

        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        return MaterializeOutcome(exit_code=process.returncode, output=output)

    async def _kill(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
            logger.warning("[COMPOSE] killed compose process %s", process.pid)
