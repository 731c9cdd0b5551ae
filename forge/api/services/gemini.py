import logging
import os
import threading
from typing import Any, Optional

import httpx

from ..models.models import GeminiResult
from .compute import ComputeTracker, get_tracker
from .production import Production, get_production

logger = logging.getLogger(__name__)

API_ENDPOINT = os.getenv(
    "GEMINI_API_ENDPOINT", "https://generativelanguage.googleapis.com/v1beta/models"
)
DEFAULT_MODEL = os.getenv("GEMINI_MODEL", "gemini-3-flash-preview")
TIMEOUT_S = float(os.getenv("GEMINI_TIMEOUT_S", "60"))
JSON_MIME = "application/json"

_client: Optional["GeminiRestClient"] = None
_client_lock = threading.Lock()


class GeminiRestError(RuntimeError):
    pass


class MissingApiKeyError(GeminiRestError):
    pass


def _api_key_from_env() -> Optional[str]:
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def _extract_text(data: Any) -> str:
    try:
        return data["candidates"][0]["content"]["parts"][0].get("text") or ""
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""


def _error_message(response: httpx.Response) -> str:
    try:
        err = response.json()
        message = (err.get("error") or {}).get("message")
    except (ValueError, AttributeError):
        message = None
    return message or f"HTTP Error {response.status_code}"


class GeminiRestClient:
    """generateContent over plain REST; every success is charged and logged to production."""

    def __init__(
        self,
        production: Production,
        tracker: ComputeTracker,
        api_key: Optional[str] = None,
        endpoint: str = API_ENDPOINT,
        default_model: str = DEFAULT_MODEL,
        timeout: float = TIMEOUT_S,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.production = production
        self.tracker = tracker
        self._api_key = api_key
        self.endpoint = endpoint.rstrip("/")
        self.default_model = default_model
        self.timeout = timeout
        self._transport = transport

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key or _api_key_from_env()

    def build_body(
        self,
        prompt: str,
        response_type: Optional[str] = None,
        system_instruction: Optional[str] = None,
    ) -> dict:
        body: dict = {"contents": [{"parts": [{"text": prompt}]}]}
        if system_instruction:
            body["system_instruction"] = {"parts": [{"text": system_instruction}]}
        if response_type == JSON_MIME:
            body["generationConfig"] = {"response_mime_type": JSON_MIME}
        return body

    def generate(
        self,
        prompt: str,
        model: Optional[str] = None,
        response_type: Optional[str] = None,
        system_instruction: Optional[str] = None,
    ) -> GeminiResult:
        api_key = self.api_key
        if not api_key:
            raise MissingApiKeyError(
                "MISSING_API_KEY: Ensure GEMINI_API_KEY is set in environment."
            )
        model = model or self.default_model
        url = f"{self.endpoint}/{model}:generateContent"
        body = self.build_body(prompt, response_type, system_instruction)

        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            r = client.post(
                url,
                params={"key": api_key},
                headers={"Content-Type": JSON_MIME},
                json=body,
            )
        if r.status_code >= 300:
            message = _error_message(r)
            logger.warning("generateContent failed model=%s status=%s: %s", model, r.status_code, message)
            raise GeminiRestError(message)

        try:
            data = r.json()
        except ValueError as e:
            raise GeminiRestError(f"Malformed response body: {e}") from e
        text = _extract_text(data)

        self.tracker.deduct_cost(model, len(prompt) + len(text))
        self.production.push_log(f"NEURAL_REST_LINK: {model} - Success")
        return GeminiResult(text=text, raw=data if isinstance(data, dict) else {})


def get_client() -> GeminiRestClient:
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = GeminiRestClient(get_production(), get_tracker())
    return _client
