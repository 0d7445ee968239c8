"""Shared HTTP helpers for collectors."""

from __future__ import annotations

import asyncio
import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Iterable, List, Optional, TypeVar

import httpx
from bs4 import BeautifulSoup

from eventfeed.core.config import settings
from eventfeed.core.errors import FetchError, ParseError

T = TypeVar("T")
R = TypeVar("R")


def default_headers() -> Dict[str, str]:
    return {"User-Agent": settings.USER_AGENT}


@asynccontextmanager
async def open_client(client: Optional[httpx.AsyncClient] = None) -> AsyncIterator[httpx.AsyncClient]:
    """Yield ``client`` as-is, or a fresh client closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(
        timeout=settings.FETCH_TIMEOUT_SECONDS,
        headers=default_headers(),
        follow_redirects=True,
    ) as fresh:
        yield fresh


async def fetch_text(client: httpx.AsyncClient, url: str, params: Optional[Dict[str, Any]] = None) -> str:
    try:
        resp = await client.get(url, params=params, timeout=settings.FETCH_TIMEOUT_SECONDS)
        resp.raise_for_status()
    except httpx.TimeoutException as exc:
        raise FetchError(url, f"timed out after {settings.FETCH_TIMEOUT_SECONDS:g}s") from exc
    except httpx.HTTPStatusError as exc:
        raise FetchError(url, str(exc.response.status_code), status_code=exc.response.status_code) from exc
    except httpx.HTTPError as exc:
        raise FetchError(url, str(exc) or exc.__class__.__name__) from exc
    return resp.text


async def fetch_json(client: httpx.AsyncClient, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
    body = await fetch_text(client, url, params=params)
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON from {url}: {exc}") from exc


async def fetch_soup(client: httpx.AsyncClient, url: str) -> BeautifulSoup:
    return BeautifulSoup(await fetch_text(client, url), "html.parser")


def next_data(soup: BeautifulSoup) -> Optional[Dict[str, Any]]:
    """The ``__NEXT_DATA__`` page state embedded by Next.js sites, if present."""
    script = soup.find("script", id="__NEXT_DATA__")
    if script is None or not script.string:
        return None
    try:
        return json.loads(script.string)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid __NEXT_DATA__ payload: {exc}") from exc


async def gather_bounded(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
    limit: Optional[int] = None,
) -> List[R]:
    """Run ``worker`` over ``items`` with at most ``limit`` in flight; results keep input order."""
    semaphore = asyncio.Semaphore(limit or settings.DETAIL_FETCH_CONCURRENCY)

    async def _run(item: T) -> R:
        async with semaphore:
            return await worker(item)

    return list(await asyncio.gather(*(_run(item) for item in items)))


def strip_tags(markup: Optional[str], limit: int = 500) -> str:
    if not markup:
        return ""
    text = BeautifulSoup(markup, "html.parser").get_text(" ")
    return " ".join(text.split())[:limit]


def absolute_url(href: Optional[str], base: str) -> Optional[str]:
    if not href:
        return None
    return href if href.startswith("http") else str(httpx.URL(base).join(href))
