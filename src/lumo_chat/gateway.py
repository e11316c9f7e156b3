"""Async HTTP gateway for the conversation backend."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .exceptions import NetworkError
from .models import ChatResponse, Conversation, Message, default_conversation_title

LOGGER = logging.getLogger(__name__)


class ConversationGateway:
    """Typed request functions for the conversation backend.

    Every call is exactly one round trip. Connectivity failures, non-2xx
    responses and unusable payloads all surface as :class:`NetworkError`;
    retrying is left to the caller.
    """

    def __init__(
        self,
        host: str,
        api_prefix: str = "/api",
        timeout: int = 120,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = host.rstrip("/") + "/" + api_prefix.strip("/")
        self.base_url = self.base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(float(timeout)))

    async def aclose(self) -> None:
        """Close the underlying HTTP client when this gateway created it."""
        if self._owns_client:
            await self._client.aclose()

    def _url(self, route: str) -> str:
        return f"{self.base_url}{route}"

    async def _request(
        self,
        method: str,
        route: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method, self._url(route), json=json, params=params
            )
        except httpx.HTTPError as exc:
            LOGGER.warning(
                "gateway.request.failed",
                extra={
                    "event": "gateway.request.failed",
                    "method": method,
                    "route": route,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise NetworkError(
                f"Unable to reach backend for {method} {route}: {exc}", route=route
            ) from exc

        if not response.is_success:
            LOGGER.warning(
                "gateway.request.status",
                extra={
                    "event": "gateway.request.status",
                    "method": method,
                    "route": route,
                    "status_code": response.status_code,
                },
            )
            raise NetworkError(
                f"{method} {route} failed with status {response.status_code}",
                status_code=response.status_code,
                route=route,
            )

        LOGGER.debug(
            "gateway.request.ok",
            extra={
                "event": "gateway.request.ok",
                "method": method,
                "route": route,
                "status_code": response.status_code,
            },
        )
        return response

    @staticmethod
    def _decode(response: httpx.Response, route: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Backend returned invalid JSON for {route}",
                status_code=response.status_code,
                route=route,
            ) from exc

    @staticmethod
    def _parse_list(payload: Any, model: type, route: str) -> list[Any]:
        if not isinstance(payload, list):
            raise NetworkError(f"Expected a JSON list from {route}", route=route)
        try:
            return [model.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise NetworkError(f"Unexpected payload from {route}: {exc}", route=route) from exc

    @staticmethod
    def _parse_one(payload: Any, model: type, route: str) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise NetworkError(f"Unexpected payload from {route}: {exc}", route=route) from exc

    async def create_conversation(
        self, mode: str, title: str | None = None
    ) -> Conversation:
        """Create a conversation; the title defaults to ``<label> - <date>``."""
        route = "/conversations"
        body = {"mode": mode, "title": title or default_conversation_title(mode)}
        response = await self._request("POST", route, json=body)
        conversation = self._parse_one(self._decode(response, route), Conversation, route)
        LOGGER.info(
            "gateway.conversation.created",
            extra={
                "event": "gateway.conversation.created",
                "conversation_id": conversation.id,
                "mode": mode,
            },
        )
        return conversation

    async def list_conversations(self) -> list[Conversation]:
        """Return conversations in backend order."""
        route = "/conversations"
        response = await self._request("GET", route)
        return self._parse_list(self._decode(response, route), Conversation, route)

    async def get_messages(self, conversation_id: str) -> list[Message]:
        """Return the chronological message list of a conversation."""
        route = f"/messages/{quote(conversation_id, safe='')}"
        response = await self._request("GET", route)
        return self._parse_list(self._decode(response, route), Message, route)

    async def send_message(
        self, conversation_id: str, content: str, mode: str
    ) -> ChatResponse:
        """Persist a user message and return it with the generated reply."""
        route = f"/chat/{quote(conversation_id, safe='')}"
        response = await self._request(
            "POST",
            route,
            json={"content": content, "role": "user"},
            params={"mode": mode},
        )
        return self._parse_one(self._decode(response, route), ChatResponse, route)

    async def clear_conversation(self, conversation_id: str) -> None:
        """Delete every message of a conversation."""
        route = f"/conversation/{quote(conversation_id, safe='')}"
        await self._request("DELETE", route)
        LOGGER.info(
            "gateway.conversation.cleared",
            extra={
                "event": "gateway.conversation.cleared",
                "conversation_id": conversation_id,
            },
        )
