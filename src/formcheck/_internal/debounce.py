"""Debounced callbacks on an anyio task group.

Each call cancels the pending one and starts a fresh timer, so the
callback runs once, *delay* seconds after the last call.
"""

from collections.abc import Callable

import anyio
from anyio.abc import TaskGroup


class Debouncer:
    """Run the most recent scheduled callback after a quiet period."""

    __slots__ = ("_pending", "_task_group", "delay")

    def __init__(self, task_group: TaskGroup, delay: float) -> None:
        self._task_group = task_group
        self.delay = delay
        self._pending: anyio.CancelScope | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def __call__(self, callback: Callable[..., object], *args: object) -> None:
        self.cancel()
        # Scope exists before the task starts so cancel() always reaches it
        scope = anyio.CancelScope()
        self._pending = scope
        self._task_group.start_soon(self._fire, scope, callback, args)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    async def _fire(
        self,
        scope: anyio.CancelScope,
        callback: Callable[..., object],
        args: tuple[object, ...],
    ) -> None:
        with scope:
            await anyio.sleep(self.delay)
            if self._pending is scope:
                self._pending = None
            callback(*args)
