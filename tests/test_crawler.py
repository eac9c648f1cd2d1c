# File: tests/test_crawler.py
# Breadth-first crawler against local aiohttp servers
from __future__ import annotations

import asyncio
import time
from collections import Counter
from urllib.parse import urlsplit

import pytest
from aiohttp import web

from conftest import html, make_app
from site_harvest.config import CrawlerConfig
from site_harvest.crawler.crawler import FrontierCrawler
from site_harvest.crawler.fetcher import Fetcher
from site_harvest.crawler.models import CrawlState
from site_harvest.utils import make_target

#: seconds a "slow" handler sleeps
SLOW_SLEEP: float = 0.5


async def run_crawler(
    config: CrawlerConfig,
    base: str,
    max_pages: int = 50,
    concurrency: int = 1,
    deadline: float | None = None,
    on_progress=None,
):
    """Run one crawl and return ``(pages, crawler)``."""
    async with Fetcher(config) as fetcher:
        crawler = FrontierCrawler(
            make_target(base),
            fetcher,
            max_pages=max_pages,
            concurrency=concurrency,
            on_progress=on_progress,
        )
        pages = await asyncio.wait_for(crawler.crawl(deadline=deadline), timeout=15)
    return pages, crawler


def paths(pages) -> list[str]:
    return [urlsplit(p.url).path or "/" for p in pages]


@pytest.mark.asyncio()
async def test_single_page_without_links(serve, crawler_config):
    base = await serve(make_app({"/": html("<h1>Only page</h1>")}))
    pages, crawler = await run_crawler(crawler_config, base)

    assert len(pages) == 1
    assert pages[0].url == base
    assert pages[0].status == 200
    assert "Only page" in pages[0].html
    assert crawler.state is CrawlState.COMPLETED


@pytest.mark.asyncio()
async def test_external_links_are_not_followed(serve, crawler_config):
    hits: Counter = Counter()

    async def root(request):
        port = request.url.port
        return web.Response(
            text=(
                '<a href="/a">A</a><a href="b">B</a>'
                f'<a href="http://localhost:{port}/c">C</a>'
                '<a href="https://external.example/page">Ext</a>'
                f'<a href="http://127.0.0.1:{port}/secret">Same server, other host</a>'
            ),
            content_type="text/html",
        )

    routes = {
        "/": root,
        "/a": html("<p>a</p>"),
        "/b": html("<p>b</p>"),
        "/c": html("<p>c</p>"),
        "/secret": html("<p>reachable only through another hostname</p>"),
    }
    base = await serve(make_app(routes, hits))

    pages, crawler = await run_crawler(crawler_config, base)

    assert len(pages) == 4
    assert set(paths(pages)) == {"/", "/a", "/b", "/c"}
    assert all(urlsplit(p.url).hostname == "localhost" for p in pages)
    assert all(urlsplit(u).hostname == "localhost" for u in crawler.visited)
    assert hits["/secret"] == 0


@pytest.mark.asyncio()
async def test_pages_come_in_breadth_first_order(serve, crawler_config):
    routes = {
        "/": html('<a href="/a">A</a><a href="/b">B</a>'),
        "/a": html('<a href="/c">C</a>'),
        "/b": html('<a href="/d">D</a><a href="/a">A again</a>'),
        "/c": html("<p>c</p>"),
        "/d": html("<p>d</p>"),
    }
    base = await serve(make_app(routes))
    pages, _ = await run_crawler(crawler_config, base)

    assert paths(pages) == ["/", "/a", "/b", "/c", "/d"]


@pytest.mark.asyncio()
async def test_page_budget_stops_the_crawl(serve, crawler_config):
    hits: Counter = Counter()
    links = "".join(f'<a href="/page{i}">P{i}</a>' for i in range(1, 21))
    routes = {"/": html(links)}
    for i in range(1, 21):
        routes[f"/page{i}"] = html(f"<h1>Page {i}</h1>")
    base = await serve(make_app(routes, hits))

    pages, crawler = await run_crawler(crawler_config, base, max_pages=5)

    assert len(pages) == 5
    assert len({p.url for p in pages}) == 5
    assert paths(pages) == ["/", "/page1", "/page2", "/page3", "/page4"]
    assert sum(hits.values()) == 5
    assert len(crawler.visited) == 5


@pytest.mark.asyncio()
async def test_page_budget_is_exact_with_concurrent_workers(serve, crawler_config):
    hits: Counter = Counter()

    async def slowish(_):
        await asyncio.sleep(0.05)
        return web.Response(text="<h1>Page</h1>", content_type="text/html")

    links = "".join(f'<a href="/page{i}">P{i}</a>' for i in range(1, 31))
    routes = {"/": html(links)}
    for i in range(1, 31):
        routes[f"/page{i}"] = slowish
    base = await serve(make_app(routes, hits))

    pages, _ = await run_crawler(crawler_config, base, max_pages=7, concurrency=4)

    assert len(pages) == 7
    assert len({p.url for p in pages}) == 7
    assert sum(hits.values()) == 7


@pytest.mark.asyncio()
async def test_failed_pages_do_not_abort_the_crawl(serve, unused_tcp_port_factory):
    hits: Counter = Counter()

    async def too_slow(_):
        await asyncio.sleep(2)
        return web.Response(text="<h1>late</h1>", content_type="text/html")

    async def image(_):
        return web.Response(body=b'<a href="/hidden">', content_type="image/png")

    async def broken(_):
        return web.Response(status=500, text="oops")

    routes = {
        "/": html(
            '<a href="/p1">1</a><a href="/p2">2</a><a href="/slow">3</a>'
            '<a href="/missing">4</a><a href="/logo.png">5</a><a href="/broken">6</a>'
            '<a href="/p3">7</a>'
        ),
        "/p1": html("<p>1</p>"),
        "/p2": html("<p>2</p>"),
        "/slow": too_slow,
        "/logo.png": image,
        "/broken": broken,
        "/p3": html("<p>3</p>"),
        "/hidden": html("<p>never linked from HTML</p>"),
    }
    base = await serve(make_app(routes, hits))
    config = CrawlerConfig(user_agent="TestAgent/1.0", timeout=0.5, scan_timeout=None)

    pages, crawler = await run_crawler(config, base)

    assert paths(pages) == ["/", "/p1", "/p2", "/p3"]
    assert hits["/hidden"] == 0
    assert f"{base}/slow" in crawler.visited
    assert f"{base}/missing" in crawler.visited


@pytest.mark.asyncio()
async def test_equivalent_links_are_fetched_once(serve, crawler_config):
    hits: Counter = Counter()
    routes = {
        "/": html(
            '<a href="/about">1</a><a href="/about/">2</a><a href="/about#team">3</a>'
            '<a href="/">home</a><a href="#top">top</a><a href="mailto:x@example.com">m</a>'
            '<a href="tel:+100">t</a><a href="javascript:void(0)">j</a>'
        ),
        "/about": html('<a href="/">home</a>'),
    }
    base = await serve(make_app(routes, hits))

    pages, _ = await run_crawler(crawler_config, base)

    assert paths(pages) == ["/", "/about"]
    assert hits == Counter({"/": 1, "/about": 1})


@pytest.mark.asyncio()
async def test_links_inside_comments_and_scripts_are_ignored(serve, crawler_config):
    hits: Counter = Counter()
    routes = {
        "/": html(
            '<!-- <a href="/commented">old</a> -->'
            '<script>var tpl = \'<a href="/scripted">x</a>\';</script>'
            '<a href="/real">real</a>'
        ),
        "/real": html("<p>real</p>"),
        "/commented": html("<p>c</p>"),
        "/scripted": html("<p>s</p>"),
    }
    base = await serve(make_app(routes, hits))

    pages, _ = await run_crawler(crawler_config, base)

    assert paths(pages) == ["/", "/real"]
    assert hits["/commented"] == 0
    assert hits["/scripted"] == 0


@pytest.mark.asyncio()
async def test_redirect_keeps_requested_url(serve, crawler_config):
    async def old(_):
        raise web.HTTPFound("/new")

    routes = {"/": html('<a href="/old">old</a>'), "/old": old, "/new": html("<h1>New home</h1>")}
    base = await serve(make_app(routes))

    pages, _ = await run_crawler(crawler_config, base)

    assert [p.url for p in pages] == [base, f"{base}/old"]
    assert "New home" in pages[1].html


@pytest.mark.asyncio()
async def test_deadline_returns_partial_results(serve, crawler_config):
    async def slow(_):
        await asyncio.sleep(3)
        return web.Response(text="<h1>slow</h1>", content_type="text/html")

    routes = {"/": html('<a href="/s1">1</a><a href="/s2">2</a>'), "/s1": slow, "/s2": slow}
    base = await serve(make_app(routes))
    config = CrawlerConfig(user_agent="TestAgent/1.0", timeout=5.0, scan_timeout=None)

    start = time.perf_counter()
    pages, crawler = await run_crawler(config, base, deadline=SLOW_SLEEP)
    elapsed = time.perf_counter() - start

    assert paths(pages) == ["/"]
    assert elapsed < 2.5
    assert crawler.state is CrawlState.COMPLETED


@pytest.mark.asyncio()
async def test_concurrent_workers_overlap_fetches(serve, crawler_config):
    async def slow(_):
        await asyncio.sleep(SLOW_SLEEP)
        return web.Response(text="<h1>slow</h1>", content_type="text/html")

    routes = {"/": html('<a href="/slow1">1</a><a href="/slow2">2</a>'), "/slow1": slow, "/slow2": slow}
    base = await serve(make_app(routes))

    start = time.perf_counter()
    pages, _ = await run_crawler(crawler_config, base, concurrency=2)
    elapsed = time.perf_counter() - start

    assert set(paths(pages)) == {"/", "/slow1", "/slow2"}
    assert elapsed < SLOW_SLEEP * 1.8


@pytest.mark.asyncio()
async def test_progress_callback_receives_running_count(serve, crawler_config):
    routes = {"/": html('<a href="/a">A</a>'), "/a": html("<p>a</p>")}
    base = await serve(make_app(routes))
    seen = []

    pages, _ = await run_crawler(
        crawler_config, base, on_progress=lambda page, count: seen.append((page.url, count))
    )

    assert seen == [(base, 1), (f"{base}/a", 2)]
    assert len(pages) == 2


@pytest.mark.asyncio()
async def test_crawler_runs_only_once(serve, crawler_config):
    base = await serve(make_app({"/": html("<p>x</p>")}))
    async with Fetcher(crawler_config) as fetcher:
        crawler = FrontierCrawler(make_target(base), fetcher)
        await crawler.crawl()
        with pytest.raises(RuntimeError):
            await crawler.crawl()


def test_invalid_budget_rejected():
    with pytest.raises(ValueError):
        FrontierCrawler(make_target("example.com"), Fetcher(), max_pages=0)
