"""Decode a Cohere response stream into output events."""

import json
import logging
from collections.abc import AsyncIterator
from typing import Protocol

from pydantic import ValidationError

from ..types import ErrorEvent, EventBlock, TextEvent, ToolEvent
from .channel import EventChannel
from .reader import DEFAULT_MAX_LINE_SIZE, LineReader

logger = logging.getLogger(__name__)

TEXT_GENERATION = "text-generation"
TOOL_CALLS_GENERATION = "tool-calls-generation"


class ResponseBody(Protocol):
    """The part of httpx.Response the resolver needs."""

    def aiter_bytes(self) -> AsyncIterator[bytes]: ...

    async def aclose(self) -> None: ...


def encode_tool_calls(tool_calls: list | None) -> str:
    """Encode tool calls as compact JSON (None encodes as null)."""
    return json.dumps(tool_calls, separators=(",", ":"), ensure_ascii=False)


async def resolve(
    channel: EventChannel,
    response: ResponseBody,
    *,
    max_line_size: int = DEFAULT_MAX_LINE_SIZE,
) -> None:
    """Read ``response`` line by line and publish events on ``channel``.

    Each complete line must be one JSON event block. Text and tool-call
    blocks become TextEvent and ToolEvent; other event types are skipped.
    A finished block ends the stream silently. A line that fails to decode,
    or tool calls that fail to re-encode, produce one ErrorEvent and end the
    stream. Any read failure other than a clean end of stream produces one
    ErrorEvent; any unterminated data left at the end is published
    verbatim as a final TextEvent.

    The response and the channel are closed on every exit path.

    Args:
        channel: Channel to publish on; closed when this returns
        response: Open response body; closed when this returns
        max_line_size: Read buffer size; longer lines arrive in fragments
    """
    buffer = bytearray()
    try:
        reader = LineReader(response.aiter_bytes(), max_line_size)
        while True:
            try:
                fragment, complete = await reader.read_line()
            except EOFError:
                break
            except Exception as e:
                logger.debug("Stream read failed: %r", e)
                await channel.send(ErrorEvent(str(e) or type(e).__name__))
                break

            buffer += fragment
            if not complete:
                continue

            line = bytes(buffer)
            buffer.clear()

            try:
                block = EventBlock.model_validate_json(line)
            except ValidationError as e:
                logger.debug("Undecodable stream line: %r", line)
                await channel.send(ErrorEvent(str(e)))
                return

            if block.is_finished:
                logger.debug(
                    "Stream finished: generation_id=%s reason=%s",
                    block.generation_id,
                    block.finish_reason,
                )
                return

            if block.event_type == TEXT_GENERATION:
                await channel.send(TextEvent(block.text))
                continue

            if block.event_type == TOOL_CALLS_GENERATION:
                try:
                    payload = encode_tool_calls(block.tool_calls)
                except (TypeError, ValueError) as e:
                    await channel.send(ErrorEvent(str(e)))
                    return
                await channel.send(ToolEvent(block.tool_calls, payload))
                continue

            logger.debug("Skipping stream event: %s", block.event_type)

        if buffer:
            await channel.send(TextEvent(buffer.decode("utf-8", errors="replace")))
    finally:
        try:
            await response.aclose()
        finally:
            await channel.close()
