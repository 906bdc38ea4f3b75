"""
Feed aggregation against canned RSS documents served by httpx.MockTransport.
"""
from __future__ import annotations

import asyncio
import gc
import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from newsdesk.services.feed_service import FeedAggregator, FeedFetchError  # noqa: E402


def _rss(title: str, items: list[tuple[str, str | None]]) -> str:
    body = []
    for item_title, pub_date in items:
        date_xml = f"<pubDate>{pub_date}</pubDate>" if pub_date else ""
        slug = item_title.lower().replace(" ", "-")
        body.append(
            f"<item><title>{item_title}</title><link>https://example.com/{slug}</link>"
            f"<guid>https://example.com/{slug}</guid>{date_xml}"
            f"<description>&lt;p&gt;About {item_title}&lt;/p&gt;</description>"
            f"<category>AI</category></item>"
        )
    return (
        '<?xml version="1.0"?><rss version="2.0"><channel>'
        f"<title>{title}</title><link>https://example.com</link><description>d</description>"
        + "".join(body)
        + "</channel></rss>"
    )


def _aggregator(documents: dict[str, tuple[int, str]], **kwargs) -> FeedAggregator:
    def handler(request: httpx.Request) -> httpx.Response:
        status, text = documents[str(request.url)]
        return httpx.Response(status, text=text, headers={"content-type": "application/rss+xml"})

    return FeedAggregator(list(documents), transport=httpx.MockTransport(handler), **kwargs)


def test_merges_sources_sorted_newest_first():
    agg = _aggregator({
        "https://a.test/feed": (200, _rss("A", [
            ("A old", "Mon, 06 Jan 2025 08:00:00 GMT"),
            ("A new", "Wed, 08 Jan 2025 08:00:00 GMT"),
        ])),
        "https://b.test/feed": (200, _rss("B", [
            ("B mid", "Tue, 07 Jan 2025 08:00:00 GMT"),
        ])),
        "https://c.test/feed": (200, _rss("C", [
            ("C newest", "Thu, 09 Jan 2025 08:00:00 +0000"),
        ])),
    })

    items = asyncio.run(agg.aggregate())

    assert [item["title"] for item in items] == ["C newest", "A new", "B mid", "A old"]
    first = items[0]
    assert first["link"] == "https://example.com/c-newest"
    assert first["guid"] == "https://example.com/c-newest"
    assert first["isoDate"] == "2025-01-09T08:00:00.000Z"
    assert first["pubDate"] == "Thu, 09 Jan 2025 08:00:00 +0000"
    assert first["contentSnippet"] == "About C newest"
    assert first["categories"] == ["AI"]


def test_returns_at_most_limit_items():
    items = [(f"Story {n}", f"{n + 1:02d} Dec 2024 10:00:00 GMT") for n in range(8)]
    agg = _aggregator({
        "https://a.test/feed": (200, _rss("A", items)),
        "https://b.test/feed": (200, _rss("B", [(f"Other {n}", f"{n + 1:02d} Sep 2024 10:00:00 GMT") for n in range(8)])),
    })

    result = asyncio.run(agg.aggregate())

    assert len(result) == 10
    assert result[0]["title"] == "Story 7"
    assert result[7]["title"] == "Story 0"
    assert result[8]["title"] == "Other 7"


def test_custom_limit():
    agg = _aggregator(
        {"https://a.test/feed": (200, _rss("A", [("One", "Mon, 06 Jan 2025 08:00:00 GMT"), ("Two", None)]))},
        limit=1,
    )
    assert [item["title"] for item in asyncio.run(agg.aggregate())] == ["One"]


def test_undated_and_unparseable_dates_sort_last():
    agg = _aggregator({
        "https://a.test/feed": (200, _rss("A", [
            ("No date", None),
            ("Dated", "Mon, 06 Jan 2025 08:00:00 GMT"),
            ("Garbage date", "sometime last week"),
        ])),
    })

    items = asyncio.run(agg.aggregate())

    assert [item["title"] for item in items] == ["Dated", "No date", "Garbage date"]
    assert "isoDate" not in items[1]
    assert "pubDate" not in items[1]


def test_one_failing_source_fails_the_whole_aggregation():
    agg = _aggregator({
        "https://a.test/feed": (200, _rss("A", [("Fine", "Mon, 06 Jan 2025 08:00:00 GMT")])),
        "https://b.test/feed": (503, "unavailable"),
    })

    with pytest.raises(FeedFetchError) as excinfo:
        asyncio.run(agg.aggregate())
    assert excinfo.value.url == "https://b.test/feed"


def test_unparseable_document_fails():
    agg = _aggregator({"https://a.test/feed": (200, "this is not a feed")})
    with pytest.raises(FeedFetchError):
        asyncio.run(agg.aggregate())


def test_transport_errors_fail():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    agg = FeedAggregator(["https://down.test/feed"], transport=httpx.MockTransport(handler))
    with pytest.raises(FeedFetchError):
        asyncio.run(agg.aggregate())


def test_malformed_source_url_is_a_fetch_error():
    agg = FeedAggregator(["https://[unterminated/feed"], transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    with pytest.raises(FeedFetchError) as excinfo:
        asyncio.run(agg.aggregate())
    assert excinfo.value.url == "https://[unterminated/feed"


def test_every_failed_source_is_collected():
    agg = _aggregator({
        "https://a.test/feed": (500, "boom"),
        "https://b.test/feed": (502, "bad gateway"),
        "https://c.test/feed": (200, _rss("C", [("Fine", "Mon, 06 Jan 2025 08:00:00 GMT")])),
    })

    async def run():
        unhandled = []
        asyncio.get_running_loop().set_exception_handler(lambda loop, context: unhandled.append(context))
        try:
            await agg.aggregate()
        except FeedFetchError:
            pass
        else:
            raise AssertionError("aggregation should fail")
        gc.collect()
        await asyncio.sleep(0)
        return unhandled

    assert asyncio.run(run()) == []
