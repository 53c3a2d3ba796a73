"""Webhook endpoint: senders POST events, speakers GET (drain) pending notifications."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Webhook-Secret",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Content-Type": "application/json",
}

# Registered so that every verb reaches the handler and gets the JSON 405.
ROUTED_METHODS = ["GET", "POST", "OPTIONS", "PUT", "PATCH", "DELETE", "HEAD"]


def json_response(status_code: int, content: dict[str, Any]) -> JSONResponse:
    return JSONResponse(content, status_code=status_code, headers=CORS_HEADERS)


def method_not_allowed() -> JSONResponse:
    return json_response(405, {"error": "Method not allowed"})


def parse_body(raw: bytes) -> dict[str, Any]:
    """JSON object body, ``{}`` when empty, ``{"raw": text}`` when unparseable."""
    text = raw.decode("utf-8", errors="replace")
    if not text:
        return {}
    try:
        body = json.loads(text)
    except ValueError:
        return {"raw": text}
    return body if isinstance(body, dict) else {"raw": text}


@router.api_route("/webhook", methods=ROUTED_METHODS)
@router.api_route("/.netlify/functions/webhook", methods=ROUTED_METHODS, include_in_schema=False)
async def webhook(request: Request) -> Response:
    if request.method == "OPTIONS":
        return Response(content=b"", status_code=200, headers=CORS_HEADERS)
    if request.method == "GET":
        return await _poll(request)
    if request.method == "POST":
        return await _receive(request)
    return method_not_allowed()


async def _poll(request: Request) -> JSONResponse:
    if not request.query_params.get("key"):
        return json_response(401, {"error": "Speaker key required"})

    try:
        notifications = await request.app.state.store.drain()
    except Exception:
        logger.exception("Notification drain failed")
        return json_response(500, {"error": "Internal server error"})
    if notifications:
        logger.info("Delivered %d notification(s) to speaker", len(notifications))
    return json_response(200, {
        "success": True,
        "count": len(notifications),
        "notifications": [n.to_dict() for n in notifications],
    })


async def _receive(request: Request) -> JSONResponse:
    try:
        body = parse_body(await request.body())
        notification = request.app.state.classifier.classify(body, dict(request.query_params))
        await request.app.state.store.enqueue(notification)
        logger.info("Queued notification %s: %s", notification.id, notification.event_type or "single")
        return json_response(200, {
            "success": True,
            "message": "Notification queued",
            "notification_id": notification.id,
        })
    except Exception:
        logger.exception("Webhook processing failed")
        return json_response(500, {"error": "Internal server error"})
