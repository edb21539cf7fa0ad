"""Sandbox runner adapter — implements SandboxPort over the runner CLI.

Argument contract::

    <runner> new <app>   --format=json --route-block=<mode> --route-file=<path> <targets...>
    <runner> start <id>  --format=json --route-block=<mode> --route-file=<path> <targets...>
"""

import asyncio
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from routescout.config import RunnerConfig
from routescout.errors import SandboxError
from routescout.ports.outbound import LaunchResult


async def _run_subprocess(cmd_args, stdout):
    """Run a subprocess to completion; kill it if the caller gives up."""
    proc = await asyncio.create_subprocess_exec(
        *cmd_args,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=stdout,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        _, stderr = await proc.communicate()
    except asyncio.CancelledError:
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
        raise
    return proc, stderr or b""


def parse_launch_output(text: str) -> LaunchResult:
    try:
        return LaunchResult.model_validate_json(text.strip())
    except ValidationError as e:
        raise SandboxError(f"Unexpected runner output: {text.strip()[:200]!r}") from e


class RunnerProcess:
    """Live runner process whose stdout is read in the background.

    The first stdout line that parses as runner output becomes the launch
    result; other lines are skipped. Reading continues to EOF so the pipe
    never fills up.
    """

    # Bound on draining stdout after exit; grandchildren may keep the pipe open
    OUTPUT_DRAIN_TIMEOUT = 2.0

    def __init__(self, proc: asyncio.subprocess.Process):
        self._proc = proc
        self._result: Optional[LaunchResult] = None
        self._output_done = asyncio.Event()
        self._reader = asyncio.ensure_future(self._read_output())

    @property
    def pid(self) -> int:
        return self._proc.pid

    @property
    def returncode(self) -> Optional[int]:
        return self._proc.returncode

    def kill(self) -> None:
        self._proc.kill()

    async def wait(self) -> int:
        returncode = await self._proc.wait()
        done, _ = await asyncio.wait({self._reader}, timeout=self.OUTPUT_DRAIN_TIMEOUT)
        if not done:
            self._reader.cancel()
            self._output_done.set()
        return returncode

    async def launch_result(self, timeout: Optional[float] = None) -> Optional[LaunchResult]:
        if not self._output_done.is_set():
            try:
                await asyncio.wait_for(self._output_done.wait(), timeout=timeout)
            except asyncio.TimeoutError:
                pass
        return self._result

    async def _read_output(self):
        try:
            while True:
                line = await self._proc.stdout.readline()
                if not line:
                    break
                text = line.decode("utf-8", errors="replace").strip()
                if self._result is not None or not text.startswith("{"):
                    continue
                try:
                    self._result = parse_launch_output(text)
                except SandboxError as e:
                    print(f"[{datetime.now().isoformat()}] Skipping runner output: {e}")
                    continue
                print(f"[{datetime.now().isoformat()}] Runner reported instance {self._result.instance_id}")
                self._output_done.set()
        finally:
            self._output_done.set()


class SandboxRunner:
    """Runs the browser inside the sandbox. Implements SandboxPort protocol."""

    def __init__(self, config: Optional[RunnerConfig] = None):
        self._config = config or RunnerConfig()

    def build_args(
        self,
        targets: Sequence[str],
        route_file: Path,
        instance_id: Optional[str] = None,
    ) -> List[str]:
        args = [self._config.executable]
        if instance_id:
            args.extend(["start", instance_id])
        else:
            args.extend(["new", self._config.app])
        args.extend([
            "--format=json",
            f"--route-block={self._config.route_block}",
            f"--route-file={route_file}",
        ])
        args.extend(targets)
        return args

    async def launch(
        self,
        targets: Sequence[str],
        route_file: Path,
        instance_id: Optional[str] = None,
    ) -> RunnerProcess:
        """Start the runner and hand back the live process."""
        args = self.build_args(targets, route_file, instance_id)
        print(f"[{datetime.now().isoformat()}] Launching {' '.join(args)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise SandboxError(f"Cannot start {self._config.executable}: {e}") from e
        return RunnerProcess(proc)

    async def run(
        self,
        targets: Sequence[str],
        route_file: Path,
        instance_id: Optional[str] = None,
    ) -> LaunchResult:
        """Run one session to completion and return its structured output."""
        fd, output_path = tempfile.mkstemp(prefix="routescout-run-", suffix=".json")
        out_file = Path(output_path)

        args = self.build_args(targets, route_file, instance_id)
        print(f"[{datetime.now().isoformat()}] Running {' '.join(args)}")

        try:
            with os.fdopen(fd, "wb") as out:
                proc, stderr = await asyncio.wait_for(
                    _run_subprocess(args, out),
                    timeout=self._config.timeout,
                )
            if proc.returncode != 0:
                raise SandboxError(
                    f"Exit code {proc.returncode}: {stderr.decode('utf-8', errors='replace').strip()}"
                )

            result = parse_launch_output(out_file.read_text(encoding="utf-8"))
            print(f"[{datetime.now().isoformat()}] Session {result.instance_id} finished")
            return result
        except asyncio.TimeoutError:
            raise SandboxError(f"Timeout ({self._config.timeout}s)")
        except OSError as e:
            raise SandboxError(f"Cannot run {self._config.executable}: {e}") from e
        finally:
            try:
                out_file.unlink(missing_ok=True)
            except OSError:
                pass
