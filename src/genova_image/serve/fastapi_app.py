"""FastAPI proxy for the external image-generation API.

Endpoints:
- GET /health
- POST /api/generate  { "prompt": "..." }
"""
from __future__ import annotations
import logging
from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from genova_image.common.config import ProviderConfig, load_provider_config
from genova_image.common.logging_setup import log_event, setup_logging
from genova_image.common.normalize import (
    describe_shape,
    extract_image_locator,
    upstream_error_message,
)
from genova_image.common.schema import (
    MSG_CONFIG_MISSING,
    MSG_IMAGE_MISSING,
    MSG_INVALID_BODY,
    MSG_INVALID_RESPONSE,
    MSG_NETWORK_FAILURE,
    MSG_PROMPT_REQUIRED,
    MSG_UNEXPECTED,
    PROVIDER_MODEL,
    GenerationOutcome,
    GenerationRequest,
    OutcomeKind,
    ProviderRequestPayload,
)

LOGGER = logging.getLogger("genova.serve.app")
setup_logging()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

app = FastAPI(title="GenovaAI Image Proxy")

# Answers preflight requests.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def _attach_cors_headers(request: Request, call_next: Any) -> Response:
    """Attach the cross-origin headers to every response, Origin or not."""
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


def _provider_client(cfg: ProviderConfig) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=cfg.timeout)


@app.get("/health")
def health() -> dict[str, Any]:
    return {
        "status": "ok",
        "model": PROVIDER_MODEL,
        "configured": load_provider_config().is_complete,
    }


async def _parse_request(request: Request) -> GenerationRequest | GenerationOutcome:
    try:
        body = await request.json()
    except ValueError:
        return GenerationOutcome.failure(OutcomeKind.INVALID_REQUEST, 400, MSG_INVALID_BODY)
    if not isinstance(body, dict):
        return GenerationOutcome.failure(OutcomeKind.INVALID_REQUEST, 400, MSG_INVALID_BODY)

    prompt = body.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        return GenerationOutcome.failure(OutcomeKind.INVALID_REQUEST, 400, MSG_PROMPT_REQUIRED)
    return GenerationRequest(prompt=prompt.strip())


def interpret_provider_response(response: httpx.Response) -> GenerationOutcome:
    """
    Map a provider HTTP response onto exactly one outcome.

    Non-2xx statuses are mirrored when they are 4xx/5xx, otherwise
    reported as 500.
    """
    status = response.status_code
    if not response.is_success:
        message = upstream_error_message(status, response.text)
        log_event(LOGGER, "provider.error", logging.WARNING, status=status, reason=message)
        mirrored = status if 400 <= status <= 599 else 500
        return GenerationOutcome.failure(OutcomeKind.UPSTREAM_ERROR, mirrored, message)

    try:
        body = response.json()
    except ValueError:
        log_event(
            LOGGER,
            "provider.unparseable",
            logging.WARNING,
            status=status,
            content_type=response.headers.get("content-type", ""),
        )
        return GenerationOutcome.failure(OutcomeKind.UPSTREAM_UNPARSEABLE, 500, MSG_INVALID_RESPONSE)

    log_event(LOGGER, "provider.success", status=status, **describe_shape(body))
    locator = extract_image_locator(body)
    if locator is None:
        log_event(LOGGER, "provider.image_missing", logging.WARNING, **describe_shape(body))
        return GenerationOutcome.failure(OutcomeKind.IMAGE_MISSING, 500, MSG_IMAGE_MISSING)

    log_event(LOGGER, "provider.image", kind=locator.kind, shape=locator.shape.value)
    return GenerationOutcome.succeeded(locator.value)


async def run_generation(request: Request) -> GenerationOutcome:
    parsed = await _parse_request(request)
    if isinstance(parsed, GenerationOutcome):
        log_event(LOGGER, "generate.rejected", logging.INFO, reason=parsed.result.message)
        return parsed

    cfg = load_provider_config()
    if not cfg.is_complete:
        log_event(LOGGER, "generate.config_missing", logging.ERROR, **cfg.redacted())
        return GenerationOutcome.failure(OutcomeKind.CONFIGURATION_MISSING, 500, MSG_CONFIG_MISSING)

    payload = ProviderRequestPayload(prompt=parsed.prompt)
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {cfg.api_key}",
    }
    log_event(LOGGER, "provider.request", url=cfg.generations_url, prompt=payload.prompt, model=payload.model)
    try:
        async with _provider_client(cfg) as client:
            response = await client.post(cfg.generations_url, headers=headers, json=payload.as_dict())
    except httpx.HTTPError as e:
        log_event(LOGGER, "provider.network_failure", logging.ERROR, error=type(e).__name__, detail=str(e))
        return GenerationOutcome.failure(OutcomeKind.NETWORK_FAILURE, 500, MSG_NETWORK_FAILURE)

    return interpret_provider_response(response)


@app.post("/api/generate")
async def generate(request: Request) -> JSONResponse:
    try:
        outcome = await run_generation(request)
    except Exception:
        LOGGER.exception("Unexpected error during image generation")
        outcome = GenerationOutcome.failure(OutcomeKind.UNEXPECTED, 500, MSG_UNEXPECTED)

    log_event(LOGGER, "generate.done", outcome=outcome.kind.value, status=outcome.status_code)
    return JSONResponse(outcome.result.to_body(), status_code=outcome.status_code)
