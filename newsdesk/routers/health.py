from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    now = datetime.now(timezone.utc)
    return {"status": "ok", "timestamp": now.isoformat(timespec="milliseconds").replace("+00:00", "Z")}
