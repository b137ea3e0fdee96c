"""Prompt submission client for the image proxy.

Holds the same view state a browser page would (prompt, loading,
image_url, error) and drives it from `submit()` and `download_image()`.
"""
from __future__ import annotations
import argparse
import base64
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx

from genova_image.common.logging_setup import log_event, setup_logging

LOGGER = logging.getLogger("genova.client")

MSG_EMPTY_PROMPT = "Please enter a prompt"
MSG_GENERIC_FAILURE = "Failed to generate image"
MSG_NO_IMAGE_URL = "No image URL in response"
SNIPPET_CHARS = 100


class ClientError(Exception):
    """Failure reported back to the user as the `error` string."""


class PromptClient:
    def __init__(self, base_url: str = "http://localhost:8000", http: Optional[httpx.Client] = None, timeout: float = 180.0) -> None:
        self.endpoint = f"{base_url.rstrip('/')}/api/generate"
        self._http = http or httpx.Client(timeout=timeout)
        self.prompt = ""
        self.loading = False
        self.image_url: Optional[str] = None
        self.error: Optional[str] = None

    def __enter__(self) -> "PromptClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        self._http.close()

    def dismiss_error(self) -> None:
        self.error = None

    def _request_image(self, prompt: str) -> str:
        response = self._http.post(self.endpoint, json={"prompt": prompt})
        log_event(LOGGER, "client.response", status=response.status_code)

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            raise ClientError(
                f"Server returned invalid content type: {content_type}. "
                f"Response: {response.text[:SNIPPET_CHARS]}"
            )

        data: Any = response.json()
        if not isinstance(data, dict):
            raise ClientError(MSG_GENERIC_FAILURE)
        if not response.is_success or data.get("success") is not True:
            message = data.get("message")
            raise ClientError(message if isinstance(message, str) and message else MSG_GENERIC_FAILURE)
        image_url = data.get("imageUrl")
        if not isinstance(image_url, str) or not image_url:
            raise ClientError(MSG_NO_IMAGE_URL)
        return image_url

    def submit(self, prompt: Optional[str] = None) -> Optional[str]:
        """
        Submit the current prompt to the proxy.

        Args:
            prompt: Replaces the held prompt when given.

        Returns:
            The generated image locator, or None when `error` was set.
        """
        if prompt is not None:
            self.prompt = prompt
        self.loading = True
        self.error = None
        self.image_url = None
        try:
            text = self.prompt.strip()
            if not text:
                self.error = MSG_EMPTY_PROMPT
                return None
            log_event(LOGGER, "client.submit", prompt=text)
            self.image_url = self._request_image(text)
            return self.image_url
        except ClientError as e:
            self.error = str(e)
        except (httpx.HTTPError, ValueError) as e:
            self.error = f"An unexpected error occurred: {e}"
        finally:
            self.loading = False
        return None

    def download_image(self, dest: str | Path) -> Optional[Path]:
        """Save the current image locally; failures only set `error`."""
        if not isinstance(self.image_url, str) or not self.image_url:
            self.error = "No image to download"
            return None
        try:
            if self.image_url.startswith(("http://", "https://")):
                r = self._http.get(self.image_url)
                r.raise_for_status()
                content = r.content
            else:
                content = base64.b64decode(self.image_url, validate=True)
            path = Path(dest)
            path.write_bytes(content)
        except (httpx.HTTPError, ValueError, OSError) as e:
            self.error = f"Failed to download image: {e}"
            return None
        log_event(LOGGER, "client.download", path=str(path), size=len(content))
        return path


def main() -> None:
    setup_logging(logging.WARNING)
    ap = argparse.ArgumentParser(description="Generate an image through the GenovaAI proxy")
    ap.add_argument("--prompt", required=True, help="Image prompt")
    ap.add_argument("--url", default="http://localhost:8000", help="Proxy base URL")
    ap.add_argument("--download", default=None, help="Save the image to this path")
    args = ap.parse_args()

    with PromptClient(args.url) as client:
        client.submit(args.prompt)
        if client.image_url and args.download:
            client.download_image(args.download)
        if client.error:
            print(client.error, file=sys.stderr)
            sys.exit(1)
        print(client.image_url)

if __name__ == "__main__":
    main()
