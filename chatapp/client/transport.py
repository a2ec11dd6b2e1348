"""HTTP transport used by the chat client."""

from __future__ import annotations

import logging
from typing import Any, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError


logger = logging.getLogger("chatapp.client.transport")

ModelT = TypeVar("ModelT", bound=BaseModel)


class TransportError(Exception):
    """A request failed, either on the network or with a non-2xx response.

    ``message`` is the human-readable text from the failed response, when the
    server provided one.
    """

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message or "Request failed")
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ("message", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return None


class ApiClient:
    """Thin async wrapper around ``httpx.AsyncClient`` for the chat REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )
        self.token: str | None = None

    def set_token(self, token: str | None) -> None:
        self.token = token
        if token:
            self._client.headers["Authorization"] = f"Bearer {token}"
        else:
            self._client.headers.pop("Authorization", None)

    async def request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportError(None) from e

        if response.is_error:
            message = _error_message(response)
            logger.info("%s %s -> %d %s", method, path, response.status_code, message or "")
            raise TransportError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError("Invalid response from server", status_code=response.status_code) from e

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def aclose(self) -> None:
        await self._client.aclose()


def parse_response(model: Type[ModelT], body: Any) -> ModelT:
    """Validate a 2xx body; a body of the wrong shape is a ``TransportError`` too."""
    try:
        return model.model_validate(body)
    except ValidationError as e:
        logger.warning("Unexpected %s response: %s", model.__name__, e)
        raise TransportError(None) from e


def parse_response_list(model: Type[ModelT], body: Any) -> list[ModelT]:
    if not isinstance(body, list):
        logger.warning("Expected a list of %s, got %s", model.__name__, type(body).__name__)
        raise TransportError(None)
    return [parse_response(model, item) for item in body]
