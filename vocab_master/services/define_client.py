"""HTTP client for the remote Define Service."""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from vocab_master import logging_manager as log_mgr
from vocab_master.lookup_cache import DefinitionResult

from .schemas import DefineErrorResponse, DefineRequest, DefineResponse

logger = log_mgr.get_logger().getChild("services.define_client")

GENERIC_ERROR_MESSAGE = "An unexpected error occurred while fetching the definition."


class DefineServiceError(RuntimeError):
    """Raised when the Define Service call does not produce a definition."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class DefineServiceClient:
    """Post definition requests and translate every failure into one error type.

    No timeout is applied unless ``timeout_seconds`` is given.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        timeout_seconds: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._endpoint = endpoint
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._owns_client = client is None

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def define(self, request: DefineRequest) -> DefinitionResult:
        payload = request.to_payload()
        try:
            response = await self._client.post(
                self._endpoint,
                json=payload,
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "Define request failed before a response arrived: %s",
                exc,
                extra={"event": "define.request.transport_error", "word": request.word},
            )
            raise DefineServiceError(str(exc) or GENERIC_ERROR_MESSAGE) from exc

        body = self._json_or_none(response)
        if not response.is_success:
            message = self._error_message(body) or (
                f"API request failed with status: {response.status_code}"
            )
            logger.warning(
                "Define request rejected: %s",
                message,
                extra={
                    "event": "define.request.failed",
                    "status": response.status_code,
                    "word": request.word,
                },
            )
            raise DefineServiceError(message, status_code=response.status_code)

        try:
            parsed = DefineResponse.model_validate(body)
        except ValidationError as exc:
            logger.warning(
                "Define response did not match the expected schema: %s",
                exc,
                extra={"event": "define.response.invalid", "word": request.word},
            )
            raise DefineServiceError(GENERIC_ERROR_MESSAGE, status_code=response.status_code) from exc

        logger.debug(
            "Define request succeeded",
            extra={"event": "define.request.ok", "status": response.status_code},
        )
        return parsed.to_definition()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "DefineServiceClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    @staticmethod
    def _json_or_none(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _error_message(body: Any) -> Optional[str]:
        if not isinstance(body, dict):
            return None
        try:
            message = DefineErrorResponse.model_validate(body).message
        except ValidationError:
            return None
        return message or None


__all__ = ["DefineServiceClient", "DefineServiceError", "GENERIC_ERROR_MESSAGE"]
