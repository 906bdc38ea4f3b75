"""
Aggregated news feed built from a fixed list of RSS/Atom sources.

All sources are fetched concurrently; one failing source fails the whole
aggregation. Items are merged, sorted newest first and truncated.
"""

from __future__ import annotations

import asyncio
import calendar
import logging
import re
import time
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Iterable, Optional

import feedparser
import httpx

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


class FeedError(Exception):
    """Base class for feed aggregation failures."""


class FeedFetchError(FeedError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch feed {url}: {reason}")
        self.url = url
        self.reason = reason


def _timestamp(entry: Any) -> Optional[float]:
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            try:
                return float(calendar.timegm(parsed))
            except (TypeError, ValueError, OverflowError):
                continue
    return None


def _snippet(html_text: str) -> str:
    text = _TAG_RE.sub(" ", html_text or "")
    return _WS_RE.sub(" ", text).strip()


def normalize_entry(entry: Any) -> dict:
    """Map a feedparser entry onto the item shape the front-end consumes."""
    item: dict[str, Any] = {}
    for source, target in (("title", "title"), ("link", "link"), ("author", "creator")):
        value = entry.get(source)
        if value:
            item[target] = value

    stamp = _timestamp(entry)
    raw_date = entry.get("published") or entry.get("updated")
    if stamp is not None:
        moment = datetime.fromtimestamp(stamp, tz=timezone.utc)
        item["pubDate"] = raw_date or format_datetime(moment)
        item["isoDate"] = moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    elif raw_date:
        item["pubDate"] = raw_date

    content = ""
    if entry.get("content"):
        content = entry["content"][0].get("value", "")
    content = content or entry.get("summary", "")
    if content:
        item["content"] = content
        item["contentSnippet"] = _snippet(content)

    guid = entry.get("id")
    if guid:
        item["guid"] = guid
    tags = [tag.get("term") for tag in entry.get("tags") or [] if tag.get("term")]
    if tags:
        item["categories"] = tags
    return item


def sort_newest_first(entries: Iterable[Any]) -> list[Any]:
    """Dated entries newest first; undated ones after them in input order."""
    dated: list[tuple[float, int, Any]] = []
    undated: list[Any] = []
    for position, entry in enumerate(entries):
        stamp = _timestamp(entry)
        if stamp is None:
            undated.append(entry)
        else:
            dated.append((stamp, position, entry))
    dated.sort(key=lambda row: (-row[0], row[1]))
    return [row[2] for row in dated] + undated


class FeedAggregator:
    """Fetches the configured sources and returns the newest `limit` items."""

    def __init__(
        self,
        sources: Iterable[str],
        *,
        limit: int = 10,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.sources = tuple(sources)
        self.limit = limit
        self.timeout = timeout
        self._transport = transport

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> list:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FeedFetchError(url, str(exc) or exc.__class__.__name__) from exc
        parsed = feedparser.parse(response.content)
        if parsed.bozo and not parsed.entries:
            raise FeedFetchError(url, f"unparseable feed ({parsed.get('bozo_exception')})")
        logger.debug("Fetched %d entries from %s", len(parsed.entries), url)
        return list(parsed.entries)

    async def aggregate(self) -> list[dict]:
        started = time.monotonic()
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
            headers={"User-Agent": "newsdesk-api/1.0"},
        ) as client:
            tasks = [asyncio.ensure_future(self._fetch(client, url)) for url in self.sources]
            try:
                batches = await asyncio.gather(*tasks)
            except FeedError:
                for task in tasks:
                    task.cancel()
                # collect the remaining outcomes so no task exception goes unretrieved
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
        entries = [entry for batch in batches for entry in batch]
        newest = sort_newest_first(entries)[: self.limit]
        logger.info(
            "Aggregated %d entries from %d feeds in %.0f ms",
            len(entries),
            len(self.sources),
            (time.monotonic() - started) * 1000,
        )
        return [normalize_entry(entry) for entry in newest]
