"""HTTP surface of the gateway (FastAPI).

Routes
------
POST /api/chat/stream     NDJSON stream of chunks for one conversation
POST /api/chat/complete   whole reply of one conversation as JSON
POST /api/models/validate provider/model check, always 200 with ``valid``
GET  /api/providers       catalog listing with ``usable`` flags
GET  /health              first usable provider, 503 when there is none

Errors raised before the first byte (validation and routing) become HTTP
status codes; once streaming has started, failures are reported in the
terminal NDJSON line instead. ``/api/chat/complete`` maps every failure,
including mid-stream ones, to a status code.
"""
from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from ..base.dto import ChatStreamRequestDTO, ValidateModelRequestDTO
from ..base.errors import ErrorCode, ProviderError, sanitize_error_message
from ..base.logging import get_logger, log_event
from ..config.defaults import GATEWAY_SERVICE_CORS_DEFAULT_ORIGINS
from ..di import build_gateway
from ..gateway import ChatGateway
from .chat_stream import NDJSON_MEDIA_TYPE, iter_ndjson

CORS_ORIGINS_ENV = "GATEWAY_SERVICE_CORS_ORIGINS"
REQUEST_ID_HEADER = "x-request-id"

# Error code -> HTTP status (pre-stream, and for /api/chat/complete)
_STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION: 400,
    ErrorCode.UNSUPPORTED: 400,
    ErrorCode.AUTH: 401,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.RATE_LIMIT: 429,
    ErrorCode.UNAVAILABLE: 503,
    ErrorCode.TIMEOUT: 504,
}

_logger = get_logger("llm_gateway.service")


def status_for_error(exc: ProviderError) -> int:
    """HTTP status for an error raised outside an NDJSON stream."""
    return _STATUS_BY_CODE.get(exc.code, 500)


def _error_detail(exc: ProviderError) -> Dict[str, Any]:
    detail: Dict[str, Any] = {
        "code": exc.code.value,
        "message": sanitize_error_message(exc.message),
        "provider": exc.provider,
    }
    trace = getattr(exc, "trace", None)
    if trace is not None:
        detail["trace"] = trace.to_dict()
    return detail


def _rejected(event: str, exc: ProviderError) -> HTTPException:
    status = status_for_error(exc)
    log_event(_logger, event, status=status, error_code=exc.code.value)
    return HTTPException(status_code=status, detail=_error_detail(exc))


def create_app(gateway: Optional[ChatGateway] = None) -> FastAPI:
    """Build the FastAPI application around ``gateway``.

    With no gateway one is built from the process configuration, so a bad
    catalog fails here with ``RegistryConfigError``.
    """
    gw = gateway or build_gateway()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        gw.shutdown("service shutdown")

    app = FastAPI(title="LLM Gateway", version="0.1.0", lifespan=lifespan)
    app.state.gateway = gw

    cors_origins_env = os.getenv(CORS_ORIGINS_ENV, GATEWAY_SERVICE_CORS_DEFAULT_ORIGINS)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins_env.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": {"code": ErrorCode.VALIDATION.value, "errors": jsonable_encoder(exc.errors())}},
        )

    @app.post("/api/chat/stream")
    async def post_chat_stream(body: ChatStreamRequestDTO, request: Request) -> StreamingResponse:
        """Stream chunks of one conversation as NDJSON lines."""
        try:
            stream_request = body.to_stream_request(request.headers.get(REQUEST_ID_HEADER))
            transport = gw.open_stream(stream_request)
        except ProviderError as exc:
            raise _rejected("service.chat.rejected", exc) from exc
        except ValueError as exc:
            raise HTTPException(
                status_code=400,
                detail={"code": ErrorCode.VALIDATION.value, "message": str(exc)},
            ) from exc

        headers = {
            "x-provider-id": transport.handle.provider_id,
            "x-model-id": transport.handle.model_id,
        }
        return StreamingResponse(
            iter_ndjson(transport, request.is_disconnected),
            media_type=NDJSON_MEDIA_TYPE,
            headers=headers,
        )

    @app.post("/api/chat/complete")
    async def post_chat_complete(body: ChatStreamRequestDTO, request: Request) -> Dict[str, Any]:
        """Run one conversation to its end and return the whole reply."""
        try:
            completion = await gw.complete(body.to_stream_request(request.headers.get(REQUEST_ID_HEADER)))
        except ProviderError as exc:
            raise _rejected("service.complete.failed", exc) from exc
        except ValueError as exc:
            raise HTTPException(
                status_code=400,
                detail={"code": ErrorCode.VALIDATION.value, "message": str(exc)},
            ) from exc
        return {"ok": True, **completion.to_dict()}

    @app.post("/api/models/validate")
    async def post_validate_model(body: ValidateModelRequestDTO) -> Dict[str, Any]:
        """Check that a provider/model pair is configured and answers."""
        validation = await gw.validate_model(body.provider_id, body.model_id)
        return validation.to_dict()

    @app.get("/api/providers")
    def get_providers() -> Dict[str, Any]:
        """List configured providers by priority with their usability."""
        return {"ok": True, "providers": gw.providers()}

    @app.get("/health")
    def health() -> JSONResponse:
        """Report the provider a fallback request would currently pick."""
        descriptor = gw.first_usable()
        if descriptor is None:
            return JSONResponse(
                status_code=503,
                content={"ok": False, "error": "No AI provider configured"},
            )
        return JSONResponse(
            content={"ok": True, "provider": descriptor.id, "model": descriptor.default_model_id},
        )

    return app


__all__ = ["create_app", "status_for_error"]
