"""
Thin synchronous client for the OpenRouter chat-completions API.
"""

import json
import logging
from typing import Any, Dict, List

import requests

from backend.caption_service.config import CaptionSettings
from backend.caption_service.errors import (
    ConfigurationError,
    UpstreamResponseError,
    UpstreamStatusError,
    UpstreamTransportError,
)
from backend.caption_service.interpreter import envelope_choices, extract_choice_text
from backend.caption_service.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

TEMPERATURE = 0.9
MAX_TOKENS = 400


class OpenRouterClient:
    """
    Sends one rendered prompt to OpenRouter and returns the generated text.

    The client holds no per-request state, so one instance is shared by all
    request handlers.
    """

    def __init__(self, settings: CaptionSettings, session: Any = None):
        self.settings = settings
        # anything with a requests-style post(); defaults to the requests module
        self.session = session if session is not None else requests

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]
        return {
            "model": self.settings.model,
            "messages": messages,
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }

    def build_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.api_key}",
        }
        # optional OpenRouter attribution headers
        if self.settings.site_url:
            headers["HTTP-Referer"] = self.settings.site_url
        if self.settings.app_title:
            headers["X-Title"] = self.settings.app_title
        return headers

    def generate(self, prompt: str) -> str:
        """
        POST the prompt and return the first choice's text.

        Args:
            prompt (str): The rendered user-role prompt.

        Returns:
            str: The raw generated text.

        Raises:
            ConfigurationError: The API key is not set. No request is sent.
            UpstreamTransportError: The request never got a response.
            UpstreamStatusError: The upstream answered with status >= 400.
            UpstreamResponseError: The body is empty, not JSON, or has no text.
        """
        if not self.settings.api_key:
            raise ConfigurationError("OPENROUTER_API_KEY is not configured, check the .env file")

        try:
            response = self.session.post(
                self.settings.api_url,
                data=json.dumps(self.build_payload(prompt)),
                headers=self.build_headers(),
                timeout=self.settings.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamTransportError(f"request to OpenRouter failed: {e}") from e

        body = response.text or ""
        logger.info("Raw response from OpenRouter: %s", body)

        if response.status_code >= 400:
            status = f"{response.status_code} {response.reason or ''}".strip()
            raise UpstreamStatusError(status, body, status_code=response.status_code)

        return self.parse_body(body)

    def parse_body(self, body: str) -> str:
        if not body:
            raise UpstreamResponseError("empty response from OpenRouter")

        if body[0] not in ("{", "["):
            raise UpstreamResponseError(f"non-JSON response from OpenRouter: {body}", body)

        try:
            envelope = json.loads(body)
        except ValueError as e:
            raise UpstreamResponseError(
                f"failed to parse JSON from OpenRouter: {e} | body: {body}", body
            ) from e

        choices = envelope_choices(envelope)
        if not choices:
            raise UpstreamResponseError(f"no choices returned from OpenRouter | body: {body}", body)

        # only the first choice is consulted
        text = extract_choice_text(choices[0])
        if not text:
            raise UpstreamResponseError(
                f"no content field found in OpenRouter response | body: {body}", body
            )
        return text
