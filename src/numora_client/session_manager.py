"""
HTTP session lifecycle for the dashboard backend.

One aiohttp session is shared by every call the client makes, including
the concurrent refresh loops. It is opened lazily on first use and
reopened if something closed it underneath the client.
"""

import logging
from typing import Optional

import aiohttp

from .models.config import ConnectionConfig

logger = logging.getLogger(__name__)

USER_AGENT = "numora-client/0.1"


class SessionManager:
    """Owns the shared aiohttp session of one NumoraClient."""

    def __init__(self, config: ConnectionConfig):
        self._config = config
        self._session: Optional[aiohttp.ClientSession] = None
        self._open_count = 0

    @property
    def session(self) -> Optional[aiohttp.ClientSession]:
        """Current session, without opening one."""
        return self._session

    @property
    def is_open(self) -> bool:
        return self._session is not None and not self._session.closed

    @property
    def open_count(self) -> int:
        """How many sessions have been opened over the client's lifetime."""
        return self._open_count

    def _build_session(self) -> aiohttp.ClientSession:
        # Three refresh loops plus user actions; the backend is a single host
        connector = aiohttp.TCPConnector(limit=20, limit_per_host=10, ttl_dns_cache=300)
        timeout = aiohttp.ClientTimeout(
            total=self._config.timeout,
            connect=min(10.0, self._config.timeout),
        )
        return aiohttp.ClientSession(
            connector=connector,
            timeout=timeout,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        )

    async def create_session(self) -> aiohttp.ClientSession:
        """Return the shared session, opening it if needed."""
        if self.is_open:
            return self._session

        if self._session is not None:
            logger.warning("Backend session was closed, reopening")

        self._session = self._build_session()
        self._open_count += 1
        logger.debug(f"Opened backend session to {self._config.base_url}")
        return self._session

    async def close_session(self) -> None:
        """Close the shared session, if any."""
        if self.is_open:
            await self._session.close()
        self._session = None
