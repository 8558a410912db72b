"""Motion permission capability.

The gate is UNGRANTED until an asynchronous request comes back granted.
A denial keeps it UNGRANTED for the rest of the session and leaves a
one-shot notice for the HUD; the face keeps running on gestures alone.
"""

from __future__ import annotations

import asyncio
import logging
from enum import IntEnum
from typing import Awaitable, Callable

log = logging.getLogger(__name__)

DENIED_NOTICE = "Motion access denied - reacting to taps only"

PromptFn = Callable[[], Awaitable[bool]]


class Permission(IntEnum):
    UNGRANTED = 0
    GRANTED = 1


class PermissionGate:
    """Gates the motion processor on the outcome of a permission request."""

    def __init__(self, granted: bool = False) -> None:
        self.state = Permission.GRANTED if granted else Permission.UNGRANTED
        self.denied = False
        self._notice: str | None = None
        self._requesting = False

    @property
    def granted(self) -> bool:
        return self.state == Permission.GRANTED

    @property
    def requesting(self) -> bool:
        return self._requesting

    def take_notice(self) -> str | None:
        """Return the denial notice once, then None."""
        notice, self._notice = self._notice, None
        return notice

    def resolve(self, granted: bool) -> Permission:
        """Apply a permission outcome."""
        if granted:
            if not self.granted:
                log.info("motion permission granted")
            self.state = Permission.GRANTED
            self.denied = False
            return self.state

        if self.granted:
            # A late denial cannot revoke a grant already in use.
            return self.state
        if not self.denied:
            log.warning("motion permission denied, continuing gesture-only")
            self._notice = DENIED_NOTICE
        self.denied = True
        return self.state

    async def ask(self, prompt: PromptFn) -> bool | None:
        """Run *prompt* and return its answer without applying it.

        Returns None when no prompt was shown (already granted, or another
        request is in flight).  A failing prompt counts as a denial.
        """
        if self.granted:
            return None
        if self._requesting:
            log.debug("permission request already pending")
            return None
        self._requesting = True
        try:
            return bool(await prompt())
        except Exception as e:
            log.warning("permission prompt failed: %s", e)
            return False
        finally:
            self._requesting = False

    async def request(self, prompt: PromptFn) -> Permission:
        """Ask *prompt* for access and apply the answer immediately."""
        granted = await self.ask(prompt)
        if granted is None:
            return self.state
        return self.resolve(granted)


class PermissionPrompt:
    """Yes/no prompt answered from the input handlers.

    ask() is the coroutine handed to PermissionGate.request(); answer() is
    called by the keyboard handler once the user picks Y or N.
    """

    def __init__(self) -> None:
        self._future: asyncio.Future[bool] | None = None

    @property
    def pending(self) -> bool:
        return self._future is not None and not self._future.done()

    async def ask(self) -> bool:
        loop = asyncio.get_running_loop()
        self._future = loop.create_future()
        try:
            return await self._future
        finally:
            self._future = None

    def answer(self, granted: bool) -> bool:
        """Resolve a pending ask().  Returns False if nothing was pending."""
        if not self.pending:
            return False
        assert self._future is not None
        self._future.set_result(granted)
        return True
