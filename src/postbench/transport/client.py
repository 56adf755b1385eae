"""Shared HTTP client backed by a single aiohttp connection pool."""

from __future__ import annotations

import aiohttp

from postbench._internal.errors import SetupError, TransportError
from postbench._internal.logging import get_logger

logger = get_logger("transport.client")


class SharedClient:
    """One ``aiohttp.ClientSession`` shared by every worker of a run.

    The session and its ``TCPConnector`` are safe for concurrent use by
    many tasks on the same event loop, so workers call ``post`` without
    any external locking. Workers never construct a client of their own;
    they receive this handle by reference and never close it.

    Attributes:
        pool_size: Maximum simultaneous connections per destination host.
    """

    def __init__(
        self,
        pool_size: int = 100,
        timeout: float | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            pool_size: Maximum connections kept per destination host.
            timeout: Total per-request timeout in seconds. None disables
                the timeout entirely.
        """
        self.pool_size = pool_size
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def closed(self) -> bool:
        """Return True when no session is open."""
        return self._session is None

    async def __aenter__(self) -> SharedClient:
        """Open the underlying connection pool.

        Raises:
            SetupError: If the session cannot be created.
        """
        try:
            connector = aiohttp.TCPConnector(limit=0, limit_per_host=self.pool_size)
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=self._timeout,
            )
        except (ValueError, RuntimeError) as exc:
            msg = f"Failed to build HTTP client: {exc}"
            raise SetupError(msg) from exc
        logger.debug("HTTP client opened: pool_size=%d", self.pool_size)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Close the underlying connection pool."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def post(self, url: str, body: bytes) -> int:
        """Send one POST request and wait for the full response.

        The response body is drained so the connection goes back to the
        pool for reuse.

        Args:
            url: Target URL.
            body: Raw request body.

        Returns:
            The HTTP status code of the response.

        Raises:
            TransportError: If no response was received.
            RuntimeError: If the client is used outside of an async
                context manager.
        """
        if self._session is None:
            msg = "SharedClient must be used as an async context manager"
            raise RuntimeError(msg)

        try:
            async with self._session.post(url, data=body) as resp:
                await resp.read()
                return resp.status
        except (aiohttp.ClientError, TimeoutError) as exc:
            msg = f"{type(exc).__name__}: {exc}"
            raise TransportError(msg) from exc
