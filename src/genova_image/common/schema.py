"""Pydantic models and dataclasses for request/response types."""
from __future__ import annotations
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel

PROVIDER_MODEL = "flux-dev"
PROVIDER_SIZE = "512x512"

MSG_INVALID_BODY = "Invalid request body"
MSG_PROMPT_REQUIRED = "Prompt is required"
MSG_CONFIG_MISSING = "API configuration is missing"
MSG_INVALID_RESPONSE = "Invalid response from API"
MSG_IMAGE_MISSING = "No image URL in API response"
MSG_NETWORK_FAILURE = "Failed to reach image API"
MSG_UNEXPECTED = "Failed to generate image"
MSG_SUCCESS = "Image generated successfully"


class GenerationRequest(BaseModel):
    prompt: str


class GenerationResult(BaseModel):
    """The only contract the browser/client side depends on."""
    success: bool
    imageUrl: Optional[str] = None
    message: Optional[str] = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


@dataclass(frozen=True)
class ProviderRequestPayload:
    """Body sent to `{base_url}/images/generations`."""
    prompt: str
    model: str = PROVIDER_MODEL
    n: int = 1
    size: str = PROVIDER_SIZE
    response_format: str = "url"

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    INVALID_REQUEST = "invalid_request"
    CONFIGURATION_MISSING = "configuration_missing"
    UPSTREAM_ERROR = "upstream_error"
    UPSTREAM_UNPARSEABLE = "upstream_unparseable"
    IMAGE_MISSING = "image_missing"
    NETWORK_FAILURE = "network_failure"
    UNEXPECTED = "unexpected"


@dataclass
class GenerationOutcome:
    """Classified result of one proxy invocation; maps to exactly one response."""
    kind: OutcomeKind
    status_code: int
    result: GenerationResult

    @classmethod
    def failure(cls, kind: OutcomeKind, status_code: int, message: str) -> "GenerationOutcome":
        return cls(kind, status_code, GenerationResult(success=False, message=message))

    @classmethod
    def succeeded(cls, image_url: str) -> "GenerationOutcome":
        return cls(
            OutcomeKind.SUCCESS,
            200,
            GenerationResult(success=True, imageUrl=image_url, message=MSG_SUCCESS),
        )
