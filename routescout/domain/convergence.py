"""Route file convergence loop.

Seeds the allow section with ``*.<host>`` patterns for the operator's URLs,
then repeatedly runs the browser in the sandbox, collects what the session
blocked, and folds it into the route file until the operator says the
application works. Hosts are only ever added, never removed.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from routescout.config import IP_ADD_SECTION, LogConfig
from routescout.domain.log_analyzer import analyze_directory
from routescout.domain.routes import dedupe, merge
from routescout.domain.seeds import derive_seeds
from routescout.errors import SessionCancelled
from routescout.ports.outbound import RouteStorePort, SandboxPort

CONFIRM_PROMPT = "Does the application work correctly?"


@dataclass
class ConvergenceResult:
    route_file: Path
    iterations: int = 0
    instance_id: Optional[str] = None
    hosts: List[str] = field(default_factory=list)


class ConvergenceLoop:
    """Grows a route file's allow list until the operator confirms."""

    def __init__(
        self,
        sandbox: SandboxPort,
        store: RouteStorePort,
        confirm: Callable[[str], bool],
        logs: Optional[LogConfig] = None,
        cancel: Optional[asyncio.Event] = None,
    ):
        self._sandbox = sandbox
        self._store = store
        self._confirm = confirm
        self._logs = logs or LogConfig()
        self._cancel = cancel

    def _persist(self, hosts: List[str]):
        document = merge(self._store.load(), IP_ADD_SECTION, hosts)
        self._store.save(document)

    async def run(self, urls: Sequence[str]) -> ConvergenceResult:
        hosts = derive_seeds(urls)
        self._persist(hosts)
        result = ConvergenceResult(route_file=self._store.path, hosts=list(hosts))

        while True:
            if self._cancel is not None and self._cancel.is_set():
                raise SessionCancelled("Convergence cancelled")

            result.iterations += 1
            print(f"[{datetime.now().isoformat()}] Iteration {result.iterations}")

            launch = await self._sandbox.run(
                list(urls), self._store.path, instance_id=result.instance_id,
            )
            result.instance_id = launch.instance_id

            blocked = analyze_directory(
                self._logs.directory_for(launch.instance_id), self._logs.prefix,
            )
            new_hosts = [h for h in blocked if h not in hosts]
            hosts = dedupe([*hosts, *blocked])
            self._persist(hosts)
            result.hosts = list(hosts)

            print(
                f"[{datetime.now().isoformat()}] {len(blocked)} blocked, "
                f"{len(new_hosts)} new: {', '.join(new_hosts) or '-'}"
            )

            if await asyncio.to_thread(self._confirm, CONFIRM_PROMPT):
                break

        print(f"[{datetime.now().isoformat()}] Route file ready: {self._store.path}")
        return result
