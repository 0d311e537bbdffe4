"""HTTP client for the external shift suggestion service."""

from __future__ import annotations

import httpx
from pydantic import ValidationError

from roster.exceptions import SuggestionServiceError

from .contracts import SuggestionRequest, SuggestionResponse


def _safe_error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        message = payload.get("error") or payload.get("message")
        if isinstance(message, str) and message.strip():
            return " ".join(message.split())[:200]

    raw_text = response.text.strip()
    if raw_text:
        return " ".join(raw_text.split())[:200]
    return "Request failed without an error payload"


class SuggestionClient:
    """Posts a SuggestionRequest as JSON and parses the SuggestionResponse."""

    def __init__(
        self,
        url: str,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_config(cls, cfg) -> "SuggestionClient":
        return cls(cfg.suggestion_url, timeout=cfg.suggestion_timeout)

    async def suggest(self, request: SuggestionRequest) -> SuggestionResponse:
        """
        Ask the service for assignments.

        Raises:
            SuggestionServiceError: transport failure, non-2xx status, invalid
                JSON, or a payload that violates the response contract
        """
        try:
            response = await self._http_client.post(
                self.url,
                json=request.to_wire(),
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise SuggestionServiceError(f"Suggestion service request failed: {exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise SuggestionServiceError(
                f"Suggestion service failed ({response.status_code}): {_safe_error_message(response)}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise SuggestionServiceError("Suggestion service returned invalid JSON") from exc

        try:
            return SuggestionResponse.model_validate(payload)
        except ValidationError as exc:
            raise SuggestionServiceError(
                f"Suggestion service returned a malformed payload: {exc.error_count()} errors"
            ) from exc

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "SuggestionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
