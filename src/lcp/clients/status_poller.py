"""Caller-side polling of a submission until judging finishes.

The proxy itself never waits on the judge; whoever wants a final verdict
schedules one of these, and cancels it when it no longer cares.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

logger = logging.getLogger(__name__)

Snapshot = Dict[str, Any]

DEFAULT_POLL_INTERVAL = 1.0  # seconds


def is_terminal_state(snapshot: Optional[Snapshot]) -> bool:
    """True once the judge reports ``state == SUCCESS`` (any case)."""
    if not snapshot:
        return False
    return str(snapshot.get("state") or "").upper() == "SUCCESS"


class SubmissionPoller:
    """Cancellable repeating task around a status check coroutine."""

    def __init__(
        self,
        check: Callable[[], Awaitable[Snapshot]],
        interval: float = DEFAULT_POLL_INTERVAL,
        is_terminal: Callable[[Snapshot], bool] = is_terminal_state,
        max_attempts: Optional[int] = None,
    ):
        if interval < 0:
            raise ValueError("interval must be non-negative")
        self.check = check
        self.interval = interval
        self.is_terminal = is_terminal
        self.max_attempts = max_attempts
        self.attempts = 0
        self.last_snapshot: Optional[Snapshot] = None
        self._task: Optional[asyncio.Task] = None

    def start(self) -> asyncio.Task:
        """Schedule the loop on the running event loop."""
        if self._task is None:
            self._task = asyncio.ensure_future(self._run())
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def wait(self) -> Snapshot:
        """Start if needed and wait for the terminal snapshot."""
        return await self.start()

    async def _run(self) -> Snapshot:
        while True:
            self.attempts += 1
            snapshot = await self.check()
            self.last_snapshot = snapshot

            if self.is_terminal(snapshot):
                return snapshot

            if self.max_attempts is not None and self.attempts >= self.max_attempts:
                raise TimeoutError(f"submission not finished after {self.attempts} checks")

            logger.debug("poll %d: state=%s", self.attempts, (snapshot or {}).get("state"))
            await asyncio.sleep(self.interval)
