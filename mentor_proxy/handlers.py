"""HTTP handlers for the mentor proxy endpoint."""

from __future__ import annotations

import json
import logging
from typing import Annotated, Any

from fastapi import Depends, Request, Response, status
from fastapi.responses import JSONResponse

from mentor_proxy.dependencies import get_gemini_service
from mentor_proxy.exceptions import ConfigurationError, InvalidRequestError, ServiceError
from mentor_proxy.models import ErrorResponse, InvocationRequest, InvocationResponse
from mentor_proxy.services.gemini_service import GeminiService

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


async def preflight() -> Response:
    """Answer CORS pre-flight checks with an empty body."""

    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


async def invoke_mentor(
    request: Request,
    gemini_service: Annotated[GeminiService, Depends(get_gemini_service)],
) -> JSONResponse:
    """Forward the prompt to the provider and return its text."""

    prompt, context = parse_invocation(await request.body())
    content = await gemini_service.generate(prompt)

    logger.info(
        "Mentor response delivered",
        extra={"prompt_length": len(prompt), "content_length": len(content)},
    )
    body = InvocationResponse(content=content, context=context)
    return JSONResponse(body.model_dump(), headers=CORS_HEADERS)


def parse_invocation(raw_body: bytes) -> tuple[str, Any]:
    """Validate an invocation body and return its prompt and context.

    Raises InvalidRequestError when the body is not a JSON object, the prompt
    is missing or blank, or the context cannot be echoed back as strict JSON.
    """

    try:
        payload = InvocationRequest.model_validate_json(raw_body)
    except ValueError as exc:
        raise InvalidRequestError("Invalid JSON payload") from exc

    if payload.prompt is None or not payload.prompt.strip():
        raise InvalidRequestError("Prompt is required")

    # JSONResponse renders with allow_nan=False.
    try:
        json.dumps(payload.context, allow_nan=False)
    except ValueError as exc:
        raise InvalidRequestError("Context must not contain NaN or Infinity") from exc

    return payload.prompt, payload.context

async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render any ServiceError as the fallback error envelope."""

    extra = {"code": exc.code, "path": request.url.path, "provider_status": exc.status_code}
    if isinstance(exc, ConfigurationError):
        logger.critical("Mentor proxy misconfigured: %s", exc.message, extra=extra)
    elif isinstance(exc, InvalidRequestError):
        logger.warning("Rejected mentor invocation: %s", exc.message, extra=extra)
    else:
        logger.error("Error in mentor invocation: %s", exc.message, extra=extra)

    body = ErrorResponse(error=exc.message)
    return JSONResponse(
        body.model_dump(),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers=CORS_HEADERS,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render unexpected failures as the fallback error envelope."""

    logger.error(
        "Unhandled error in mentor invocation",
        exc_info=exc,
        extra={"path": request.url.path},
    )

    body = ErrorResponse(error="Internal server error")
    return JSONResponse(
        body.model_dump(),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers=CORS_HEADERS,
    )
