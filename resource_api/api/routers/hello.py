# This file defines the plain-text greeting routes used as a routing smoke test.
# It exists so a deployment can be checked end to end without touching any store.

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from resource_api.api.error_handlers import APIError

router = APIRouter(tags=["hello"])


@router.get("/", response_class=PlainTextResponse)
def hello() -> str:
    return "Hello world!"


@router.post("/echo", response_class=PlainTextResponse)
async def echo(request: Request) -> str:
    body = await request.body()
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise APIError(
            status_code=400,
            error_code="INVALID_BODY",
            message="Request body must be valid UTF-8 text.",
        ) from exc
    return f"Hello {text}!"


@router.get("/hey", response_class=PlainTextResponse)
def manual_hello() -> str:
    return "Hey there!"
