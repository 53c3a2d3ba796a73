"""Health endpoint."""

from fastapi import APIRouter, Request

from webhook_speaker.store import RedisNotificationStore

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    store = request.app.state.store
    checks = {"api": "ok", "store": store.backend, "redis": "not_configured"}
    if isinstance(store, RedisNotificationStore):
        checks["redis"] = "ok" if await store.ping() else "unavailable"

    status = "degraded" if checks["redis"] == "unavailable" else "ok"
    return {"status": status, "checks": checks}
