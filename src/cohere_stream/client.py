"""Client functions for the Cohere streaming API."""

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Sequence

import httpx
from pydantic import BaseModel, ValidationError

from .errors import CohereError
from .payload import build_payload
from .stream import EventChannel, resolve
from .types import (
    CohereConfig,
    ConversationMessage,
    StreamReply,
    ToolDefinition,
    ToolInvocationResult,
)

logger = logging.getLogger(__name__)

# Resolver tasks are kept referenced until they finish
_background_tasks: set[asyncio.Task[None]] = set()


class APIErrorResponse(BaseModel):
    """Error body returned by the API (internal)."""

    message: str


def _endpoint(config: CohereConfig) -> str:
    path = "/v1/chat" if config.chat else "/v1/generate"
    return f"{config.base_url}{path}"


def _build_headers(config: CohereConfig) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {config.token}",
        "Accept-Language": "en-US,en;q=0.9",
        "Origin": "https://dashboard.cohere.com",
        "Referer": "https://dashboard.cohere.com/",
    }


def _parse_error_response(response: httpx.Response) -> CohereError:
    """Parse error response from the API, handling non-JSON gracefully."""
    status = f"HTTP {response.status_code} {response.reason_phrase}"
    try:
        error_resp = APIErrorResponse.model_validate(response.json())
        message = f"{status}: {error_resp.message}"
    except (json.JSONDecodeError, ValidationError):
        message = status
    return CohereError(message, "HTTP_ERROR", response.text)


class _ClientBoundResponse:
    """Response body that also closes its HTTP client when closed."""

    def __init__(self, response: httpx.Response, client: httpx.AsyncClient):
        self._response = response
        self._client = client

    def aiter_bytes(self) -> AsyncIterator[bytes]:
        return self._response.aiter_bytes()

    async def aclose(self) -> None:
        try:
            await self._response.aclose()
        finally:
            await self._client.aclose()


async def reply(
    config: CohereConfig,
    history: Sequence[ConversationMessage],
    system: str,
    message: str,
    *,
    tools: Sequence[ToolDefinition] | None = None,
    tool_results: Sequence[ToolInvocationResult] | None = None,
) -> StreamReply:
    """Send a message and stream the reply.

    Returns as soon as the response headers arrive. The body is decoded by a
    background task that publishes TextEvent, ToolEvent and ErrorEvent values
    on ``result.events`` and closes it when the stream ends. Failures after
    this point arrive as ErrorEvent, never as exceptions. A caller that stops
    reading early should call ``result.aclose()`` to release the connection.

    Args:
        config: Client configuration; ``config.chat`` selects the endpoint
        history: Prior conversation, oldest first
        system: System prompt
        message: The user message
        tools: Tool definitions (chat mode only)
        tool_results: Results of earlier tool calls (chat mode only)

    Returns:
        StreamReply with the event channel and aclose()

    Raises:
        CohereError: On transport failures or non-success HTTP status
    """
    url = _endpoint(config)
    body = build_payload(config, history, system, message, tools, tool_results)

    # The client stays open until the resolver closes the response
    client = httpx.AsyncClient(timeout=config.timeout, proxy=config.proxy)

    logger.debug("POST %s model=%s", url, config.model)
    try:
        response = await client.send(
            client.build_request(
                "POST",
                url,
                headers=_build_headers(config),
                json=body,
            ),
            stream=True,
        )
    except httpx.HTTPError as e:
        await client.aclose()
        raise CohereError(f"Request to {url} failed: {e}", "TRANSPORT_ERROR") from e

    if not response.is_success:
        await response.aread()
        await response.aclose()
        await client.aclose()
        raise _parse_error_response(response)

    channel = EventChannel()
    task = asyncio.create_task(
        resolve(channel, _ClientBoundResponse(response, client))
    )
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return StreamReply(events=channel, _task=task)
