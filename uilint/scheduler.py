"""
Execution scheduler — runs independent plan entries on a bounded pool of
asyncio workers.

Each worker repeatedly claims the next unclaimed plan index from a shared
cursor and awaits that entry's ``run()`` coroutine.  Results land in a
pre-sized list at the entry's plan index, so output order never depends on
completion order.

On the first failure the scheduler stops handing out new entries; entries
already running finish, then the first error is raised.  There are no
timeouts and no retries here.
"""
from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable


class EntryState(str, Enum):
    QUEUED    = "queued"
    RUNNING   = "running"
    SUCCEEDED = "succeeded"
    FAILED    = "failed"


@dataclass
class PlanEntry:
    """One (scenario, viewport) unit of work."""
    scenario_key: str
    scenario:     Any
    viewport:     Any
    run:          "Callable[[], Awaitable[Any]]"
    state:        EntryState = field(default=EntryState.QUEUED)

    @property
    def label(self) -> str:
        return f"{self.scenario_key}@{getattr(self.viewport, 'name', self.viewport)}"


def default_worker_count() -> int:
    return min(4, max(1, os.cpu_count() or 1))


async def run_plan_with_concurrency(
    plan: "list[PlanEntry]",
    workers: int,
    on_event: "Callable[[PlanEntry], None] | None" = None,
) -> list:
    """
    Run every plan entry with at most ``workers`` in flight.

    Args:
        plan:     entries to run; each has an async ``run()``
        workers:  requested pool size, clamped to [1, len(plan)]
        on_event: optional callback after each state change (for logging)

    Returns results indexed like plan.  Raises the first entry error.
    """
    if not plan:
        return []

    results     = [None] * len(plan)
    cursor      = 0
    aborted     = False
    first_error = None

    def _set_state(entry: PlanEntry, state: EntryState):
        entry.state = state
        if on_event is not None:
            on_event(entry)

    async def worker():
        nonlocal cursor, aborted, first_error
        while not aborted and cursor < len(plan):
            index = cursor
            cursor += 1
            entry = plan[index]
            _set_state(entry, EntryState.RUNNING)
            try:
                results[index] = await entry.run()
            except Exception as exc:
                _set_state(entry, EntryState.FAILED)
                if first_error is None:
                    first_error = exc
                    aborted = True
            else:
                _set_state(entry, EntryState.SUCCEEDED)

    count = max(1, min(workers, len(plan)))
    await asyncio.gather(*(worker() for _ in range(count)))

    if first_error is not None:
        raise first_error
    return results
