"""Normalization of the image provider's response documents.

The provider is known to answer in one of two shapes:

- flat:   {"data": [{"url": ..., "b64_json": ...}]}
- nested: {"data": {"data": [{"url": ..., "b64_json": ...}]}}

Shapes are matched explicitly, flat first. Within a shape `url` wins over
`b64_json`. Anything else yields no locator.
"""
from __future__ import annotations
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

ERROR_SNIPPET_CHARS = 100
LOCATOR_FIELDS = ("url", "b64_json")


class ResponseShape(str, Enum):
    FLAT = "flat"
    NESTED = "nested"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ImageLocator:
    value: str
    kind: str
    shape: ResponseShape


def classify_shape(body: Any) -> ResponseShape:
    """Tag a parsed provider body with its known shape, or UNKNOWN."""
    if not isinstance(body, dict):
        return ResponseShape.UNKNOWN
    data = body.get("data")
    if isinstance(data, list):
        return ResponseShape.FLAT
    if isinstance(data, dict) and isinstance(data.get("data"), list):
        return ResponseShape.NESTED
    return ResponseShape.UNKNOWN


def _items_for(body: Any, shape: ResponseShape) -> list[Any]:
    if shape is ResponseShape.FLAT:
        return body["data"]
    if shape is ResponseShape.NESTED:
        return body["data"]["data"]
    return []


def _locator_from_item(item: Any, shape: ResponseShape) -> Optional[ImageLocator]:
    if not isinstance(item, dict):
        return None
    for field in LOCATOR_FIELDS:
        value = item.get(field)
        if isinstance(value, str) and value:
            return ImageLocator(value=value, kind=field, shape=shape)
    return None


def extract_image_locator(body: Any) -> Optional[ImageLocator]:
    """
    Extract the single image locator from a provider success body.

    Args:
        body: Parsed JSON document returned by the provider.

    Returns:
        The locator from the first element of the matched shape, or None
        when neither known shape carries one.
    """
    shape = classify_shape(body)
    items = _items_for(body, shape)
    if not items:
        return None
    return _locator_from_item(items[0], shape)


def upstream_error_message(status: int, text: str) -> str:
    """Human-readable reason for a non-success provider response."""
    try:
        parsed = json.loads(text)
    except ValueError:
        snippet = text.strip()[:ERROR_SNIPPET_CHARS]
        return f"API error: {status} - {snippet}" if snippet else f"API error: {status}"

    if isinstance(parsed, dict):
        message = parsed.get("message")
        if isinstance(message, str) and message:
            return message
        error = parsed.get("error")
        if isinstance(error, dict):
            error = error.get("message")
        if isinstance(error, str) and error:
            return error
    return f"API responded with status {status}"


def describe_shape(body: Any) -> dict[str, Any]:
    """Size-bounded summary of a provider body for diagnostics."""
    keys = sorted(body.keys())[:10] if isinstance(body, dict) else []
    shape = classify_shape(body)
    return {
        "shape": shape.value,
        "keys": keys,
        "items": len(_items_for(body, shape)),
    }
