"""FastAPI application that receives alert webhooks."""
from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import uvicorn
from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from app.auth import TOKEN_HEADER, token_matches
from app.config import Settings, get_settings
from app.errors import ApiError, RateLimitExceeded, Unauthorized
from app.logging_config import configure_logging
from app.notifier import SoundNotifier
from app.rate_limit import FixedWindowRateLimiter
from app.request_id import REQUEST_ID_HEADER, new_request_id

settings = get_settings()
configure_logging(settings.log_level)
LOGGER = logging.getLogger(__name__)

rate_limiter = FixedWindowRateLimiter(settings.rate_limit_requests, settings.rate_limit_window_seconds)
notifier = SoundNotifier(settings.alert_sound, settings.alert_volume)

FIRING = "firing"


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    rate_limiter.start()
    LOGGER.info("Server listening on http://localhost:%s/test", settings.port)
    try:
        yield
    finally:
        await rate_limiter.stop()
        await notifier.wait_idle()
        LOGGER.info("Server stopped")


app = FastAPI(title="Alert Webhook Receiver", lifespan=lifespan)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


@app.middleware("http")
async def respond_bad_request_on_error(request: Request, call_next):  # type: ignore[override]
    try:
        return await call_next(request)
    except Exception as exc:  # noqa: BLE001
        LOGGER.error(
            "Error while handling request",
            extra={"request_id": _request_id(request), "detail": str(exc)},
        )
        return PlainTextResponse("Bad Request", status_code=400)


@app.middleware("http")
async def assign_request_id(request: Request, call_next):  # type: ignore[override]
    request_id = new_request_id()
    request.state.request_id = request_id
    LOGGER.info(
        "%s %s",
        request.method,
        request.url.path,
        extra={
            "request_id": request_id,
            "client_ip": _client_ip(request),
            "method": request.method,
            "path": request.url.path,
        },
    )
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


@app.exception_handler(ApiError)
async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    LOGGER.error("Invalid request", extra={"request_id": _request_id(request), "detail": str(exc)})
    return PlainTextResponse("Bad Request", status_code=400)


def get_rate_limiter() -> FixedWindowRateLimiter:
    """Provide the process-wide rate limiter."""

    return rate_limiter


def get_notifier() -> SoundNotifier:
    """Provide the alert sound notifier."""

    return notifier


def enforce_rate_limit(
    request: Request, limiter: FixedWindowRateLimiter = Depends(get_rate_limiter)
) -> None:
    if not limiter.hit(_client_ip(request)).allowed:
        raise RateLimitExceeded()


def require_token(
    token: Optional[str] = Header(None, alias=TOKEN_HEADER),
    settings: Settings = Depends(get_settings),
) -> None:
    if not token_matches(settings.api_token, token):
        raise Unauthorized()


async def _read_payload(request: Request) -> Any:
    body = await request.body()
    if not body.strip():
        return {}
    return json.loads(body)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.post("/test", dependencies=[Depends(enforce_rate_limit), Depends(require_token)])
async def receive_alert(
    request: Request, alert_notifier: SoundNotifier = Depends(get_notifier)
) -> dict:
    """Acknowledge an alert and sound a local notification when it is firing."""

    payload = await _read_payload(request)
    request_id = _request_id(request)
    LOGGER.info("Alert notification received", extra={"request_id": request_id, "payload": payload})

    status = payload.get("status") if isinstance(payload, dict) else None
    if status == FIRING and alert_notifier.is_supported():
        alert_notifier.dispatch()

    LOGGER.info("Alert notification processed", extra={"request_id": request_id})
    return {"status": "ok", "message": "received"}


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
