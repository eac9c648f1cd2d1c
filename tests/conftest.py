# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from typing import Awaitable, Callable, Dict

import pytest
import pytest_asyncio
from aiohttp import web

from site_harvest.config import CrawlerConfig
from site_harvest.crawler.models import Page

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def html(text: str) -> Handler:
    """Handler returning *text* as an HTML page."""

    async def _handler(_):
        return web.Response(text=text, content_type="text/html")

    return _handler


def xml(text: str) -> Handler:
    async def _handler(_):
        return web.Response(text=text, content_type="application/xml")

    return _handler


def make_app(routes: Dict[str, Handler], hits: Counter | None = None) -> web.Application:
    """Build an app from ``{path: handler}``; every request is counted in *hits*."""

    @web.middleware
    async def count_hits(request, handler):
        if hits is not None:
            hits[request.path] += 1
        return await handler(request)

    app = web.Application(middlewares=[count_hits])
    for path, handler in routes.items():
        app.router.add_get(path, handler)
    return app


@pytest.fixture()
def crawler_config() -> CrawlerConfig:
    """Fast settings for local test servers; no overall deadline."""
    return CrawlerConfig(user_agent="TestAgent/1.0", timeout=2.0, scan_timeout=None)


@pytest_asyncio.fixture
async def serve(unused_tcp_port_factory):
    """Start an aiohttp app on a free port, return its base URL, clean up afterwards."""
    runners = []

    async def _serve(app: web.Application) -> str:
        port = unused_tcp_port_factory()
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "localhost", port)
        await site.start()
        runners.append(runner)
        return f"http://localhost:{port}"

    yield _serve

    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def sample_page() -> Page:
    markup = '<html><body><a href="/link1">L1</a><a href="http://external.com">X</a></body></html>'
    return Page(url="https://example.com", html=markup, status=200)
