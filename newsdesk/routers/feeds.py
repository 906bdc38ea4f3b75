import logging

from fastapi import APIRouter, HTTPException, Request

from newsdesk.services.feed_service import FeedAggregator, FeedError

router = APIRouter(tags=["feeds"])
logger = logging.getLogger(__name__)


def _get_aggregator(request: Request) -> FeedAggregator:
    aggregator = getattr(getattr(request.app, "state", None), "feed_aggregator", None)
    if not aggregator:
        raise RuntimeError("FeedAggregator not configured")
    return aggregator


@router.get("/rss")
async def rss(request: Request):
    try:
        items = await _get_aggregator(request).aggregate()
    except FeedError:
        logger.exception("Error fetching RSS feeds")
        raise HTTPException(500, "Failed to fetch RSS feeds")
    return {"items": items}
