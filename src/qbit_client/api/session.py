"""Login credentials and the cached session token"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel, Field

log = logging.getLogger(__name__)


class Credential(BaseModel):
    """Username and password used to obtain a session token"""

    username: str
    password: str = Field(repr=False)


class SessionCell:
    """Write-once slot for the session token

    The first token stored wins, later ``set`` calls are ignored. Concurrent
    callers that find the slot empty share a single login attempt. A failed
    attempt stores nothing, so the next caller starts a fresh login.
    """

    def __init__(self, token: str | None = None):
        self._token = token
        self._pending: asyncio.Future[str] | None = None

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> bool:
        """Store ``token`` if the slot is empty, return whether it was stored"""
        if self._token is not None:
            return False
        self._token = token
        return True

    async def get_or_login(self, login: Callable[[], Awaitable[str]]) -> str:
        """Return the cached token, running ``login`` once if there is none"""
        if self._token is not None:
            log.debug('Already logged in, skipping')
            return self._token

        if self._pending is None:
            log.debug('Session token not found, logging in')
            self._pending = asyncio.ensure_future(login())
            self._pending.add_done_callback(self._finish)
        else:
            log.debug('Login already in flight, waiting for it')

        token = await asyncio.shield(self._pending)
        # First writer wins, every caller returns the token that was kept
        self.set(token)
        return self._token or token

    def _finish(self, attempt: 'asyncio.Future[str]') -> None:
        if self._pending is attempt:
            self._pending = None
        if attempt.cancelled():
            return
        if attempt.exception() is not None:
            log.debug('Login failed, nothing cached')
            return
        self.set(attempt.result())
