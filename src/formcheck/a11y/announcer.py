"""Screen-reader announcements through ARIA live regions.

The page carries two live regions::

    <div aria-live="polite"><div id="sr-status" class="visually-hidden"></div></div>
    <div aria-live="assertive"><div id="sr-alert" class="visually-hidden"></div></div>

``announce()`` empties the region, writes the message a moment later
(assistive technology only reads changes) and clears it again after a
few seconds. Timers need a running task group::

    announcer = Announcer(document)
    async with announcer.running():
        announcer.announce("Saved", "polite")

Outside ``running()`` the message is written at once and never cleared.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Literal

import anyio
from anyio.abc import TaskGroup
from bs4 import Tag

from formcheck.config import AnnouncerOptions

_log = logging.getLogger("formcheck.a11y")

type Priority = Literal["polite", "assertive"]


class LiveRegion:
    """Text of one live region, mirrored into its element when there is one."""

    __slots__ = ("element", "text")

    def __init__(self, element: Tag | None = None) -> None:
        self.element = element
        self.text = element.get_text() if element is not None else ""

    def write(self, text: str) -> None:
        self.text = text
        if self.element is not None:
            self.element.string = text


class Announcer:
    """Announce messages to assistive technology. One per page."""

    def __init__(self, document: Tag | None = None, options: AnnouncerOptions | None = None) -> None:
        self.options = options or AnnouncerOptions()
        self.regions: dict[str, LiveRegion] = {
            "polite": LiveRegion(self._find(document, self.options.polite_region_id)),
            "assertive": LiveRegion(self._find(document, self.options.assertive_region_id)),
        }
        self._generation = {"polite": 0, "assertive": 0}
        self._task_group: TaskGroup | None = None

    @staticmethod
    def _find(document: Tag | None, element_id: str) -> Tag | None:
        if document is None:
            return None
        element = document.find(id=element_id)
        if element is None:
            _log.debug("No live region #%s in document", element_id)
        return element

    def text(self, priority: Priority = "polite") -> str:
        return self.regions[priority].text

    @asynccontextmanager
    async def running(self) -> AsyncIterator[Announcer]:
        """Run announcement timers; pending ones are cancelled on exit."""
        async with anyio.create_task_group() as tg:
            self._task_group = tg
            try:
                yield self
            finally:
                self._task_group = None
                tg.cancel_scope.cancel()

    def announce(self, message: str, priority: Priority = "polite") -> None:
        """Announce *message*. Anything but ``"assertive"`` is polite."""
        key = "assertive" if priority == "assertive" else "polite"
        region = self.regions[key]
        self._generation[key] += 1
        generation = self._generation[key]

        region.write("")
        if self._task_group is None:
            region.write(message)
            return
        self._task_group.start_soon(self._deliver, key, message, generation)

    async def _deliver(self, key: str, message: str, generation: int) -> None:
        region = self.regions[key]
        delay = self.options.announce_delay
        await anyio.sleep(delay)
        if self._generation[key] != generation:
            return
        region.write(message)
        await anyio.sleep(max(self.options.clear_after - delay, 0.0))
        # A newer announcement owns the region now
        if self._generation[key] == generation:
            region.write("")
