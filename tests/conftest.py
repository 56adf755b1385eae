"""Shared test fixtures for the postbench test suite."""

from __future__ import annotations

import asyncio
import socket
import threading
from typing import TYPE_CHECKING

import pytest
from aiohttp import web

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator
    from pathlib import Path


# =============================================================================
# Pytest configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure."""
    for item in items:
        test_path = str(item.fspath)
        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/e2e/" in test_path:
            item.add_marker(pytest.mark.e2e)


# =============================================================================
# Network utilities
# =============================================================================


def _get_free_port() -> int:
    """Find an available port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


@pytest.fixture
def unreachable_url() -> str:
    """URL of a local port with nothing listening on it."""
    return f"http://127.0.0.1:{_get_free_port()}/echo"


# =============================================================================
# Echo HTTP server handlers
# =============================================================================

BODIES_KEY = web.AppKey("bodies", list[bytes])
ALTERNATE_KEY = web.AppKey("alternate", list[int])


async def _echo_handler(request: web.Request) -> web.Response:
    """Echo the request body back with a 200."""
    body = await request.read()
    request.app[BODIES_KEY].append(body)
    return web.Response(body=body, status=200)


async def _error_handler(request: web.Request) -> web.Response:
    """Return a configurable error status (query param: ?status=500)."""
    await request.read()
    status = int(request.query.get("status", "500"))
    return web.json_response({"error": True}, status=status)


async def _alternate_handler(request: web.Request) -> web.Response:
    """Fail every second request received with a 503."""
    await request.read()
    counter = request.app[ALTERNATE_KEY]
    counter.append(1)
    if len(counter) % 2 == 0:
        return web.json_response({"error": True}, status=503)
    return web.json_response({"status": "ok"})


async def _delay_handler(request: web.Request) -> web.Response:
    """Respond after a configurable delay (query param: ?delay=0.05)."""
    await request.read()
    delay = float(request.query.get("delay", "0.05"))
    await asyncio.sleep(delay)
    return web.json_response({"delayed_by": delay})


def _create_echo_app() -> web.Application:
    """Build the echo server app with all test routes."""
    app = web.Application()
    app[BODIES_KEY] = []
    app[ALTERNATE_KEY] = []
    app.router.add_post("/echo", _echo_handler)
    app.router.add_post("/error", _error_handler)
    app.router.add_post("/alternate", _alternate_handler)
    app.router.add_post("/delay", _delay_handler)
    return app


# =============================================================================
# Fixtures
# =============================================================================


class EchoServer:
    """Handle to a running echo server."""

    def __init__(self, base_url: str, app: web.Application) -> None:
        self.base_url = base_url
        self.app = app

    @property
    def bodies(self) -> list[bytes]:
        """Request bodies received by ``/echo`` so far."""
        return self.app[BODIES_KEY]


@pytest.fixture
async def echo_server() -> AsyncIterator[EchoServer]:
    """Aiohttp echo server running on the test's event loop."""
    app = _create_echo_app()
    port = _get_free_port()
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    yield EchoServer(f"http://127.0.0.1:{port}", app)
    await runner.cleanup()


@pytest.fixture
def sync_echo_server() -> Iterator[str]:
    """Echo server running in a background thread for sync tests.

    Needed when the code under test runs its own event loop with
    ``asyncio.run`` and blocks the main thread.
    """
    port = _get_free_port()
    started = threading.Event()
    loop_holder: list[asyncio.AbstractEventLoop] = []

    def _thread_target() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        app = _create_echo_app()
        runner = web.AppRunner(app)
        loop.run_until_complete(runner.setup())
        site = web.TCPSite(runner, "127.0.0.1", port)
        loop.run_until_complete(site.start())
        loop_holder.append(loop)
        started.set()
        loop.run_forever()
        loop.run_until_complete(runner.cleanup())
        loop.close()

    thread = threading.Thread(target=_thread_target, daemon=True)
    thread.start()
    started.wait(timeout=5.0)

    yield f"http://127.0.0.1:{port}"

    if loop_holder:
        loop_holder[0].call_soon_threadsafe(loop_holder[0].stop)
    thread.join(timeout=5.0)


@pytest.fixture
def body_file(tmp_path: Path) -> Path:
    """Temporary request body file."""
    path = tmp_path / "body.json"
    path.write_bytes(b'{"hello": "world"}')
    return path
