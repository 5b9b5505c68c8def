"""Type definitions for the Cohere stream client."""

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .stream.channel import Channel

BASE_URL = "https://api.cohere.ai"

COMMAND = "command"
COMMAND_LIGHT = "command-light"
COMMAND_LIGHT_NIGHTLY = "command-light-nightly"
COMMAND_NIGHTLY = "command-nightly"
COMMAND_R = "command-r"
COMMAND_R_PLUS = "command-r-plus"


@dataclass(frozen=True)
class CohereConfig:
    """Configuration for talking to the Cohere generation API."""

    token: str
    """Bearer token sent in the Authorization header"""

    model: str = COMMAND_R
    """Model identifier, e.g. COMMAND_R_PLUS"""

    temperature: float = -1.0
    """Sampling temperature; negative means unset"""

    seed: int = 0
    """Sampling seed; zero or negative means unset"""

    chat: bool = True
    """True selects the chat endpoint, False the generate (completion) endpoint"""

    top_k: int = 0
    """Top-k sampling width (completion mode only)"""

    max_tokens: int = 4096
    """Maximum tokens to generate (completion mode only)"""

    stop_sequences: tuple[str, ...] = ()
    """Sequences that stop generation; omitted from the request when empty"""

    safety_mode: str | None = None
    """Safety mode, e.g. "CONTEXTUAL" (chat mode only)"""

    base_url: str = BASE_URL
    """Base URL of the API"""

    timeout: float = 60.0
    """Request timeout in seconds"""

    proxy: str | None = None
    """Optional proxy URL for the HTTP transport"""


class ConversationMessage(BaseModel):
    """One message of the chat history."""

    model_config = ConfigDict(frozen=True)

    role: str
    content: str

    def to_wire(self) -> dict[str, str]:
        return {"role": self.role, "message": self.content}


class ToolDefinition(BaseModel):
    """Tool the model may call (chat mode only). Not interpreted locally."""

    name: str
    description: str
    parameter_definitions: dict[str, Any] = Field(default_factory=dict)


class ToolInvocationResult(BaseModel):
    """Outputs of a tool call, sent back on the next turn."""

    call: Any
    outputs: list[Any] = Field(default_factory=list)


class EventBlock(BaseModel):
    """One decoded line of the response stream (internal).

    Missing fields fall back to their zero values. Values of the wrong JSON
    type are rejected rather than coerced.
    """

    model_config = ConfigDict(strict=True)

    is_finished: bool = False
    event_type: str = ""
    generation_id: str = ""
    text: str = ""
    finish_reason: str = ""
    tool_calls: list[Any] | None = None


# Output events published on the channel. str() renders the tagged line
# form ("text: ...", "tool: ...", "error: ...").


@dataclass(frozen=True)
class TextEvent:
    """A piece of generated text."""

    text: str
    kind: Literal["text"] = field(default="text", init=False)

    def __str__(self) -> str:
        return f"text: {self.text}"


@dataclass(frozen=True)
class ToolEvent:
    """Tool calls requested by the model."""

    tool_calls: list[Any] | None
    """Decoded tool calls, passed through as received (None when absent)"""

    payload: str
    """Compact JSON encoding of tool_calls"""

    kind: Literal["tool"] = field(default="tool", init=False)

    def __str__(self) -> str:
        return f"tool: {self.payload}"


@dataclass(frozen=True)
class ErrorEvent:
    """A failure that ended the stream."""

    message: str
    kind: Literal["error"] = field(default="error", init=False)

    def __str__(self) -> str:
        return f"error: {self.message}"


OutputEvent = TextEvent | ToolEvent | ErrorEvent


@dataclass
class StreamReply:
    """Result from a streaming reply.

    ``events`` yields output events until the stream ends. A caller that
    stops reading early must call aclose(); otherwise the background
    resolver stays parked on the channel and holds the connection open.
    """

    events: "Channel[OutputEvent]"
    """Channel of TextEvent, ToolEvent and ErrorEvent values"""

    _task: asyncio.Task[None]
    """Background task decoding the response body"""

    async def aclose(self) -> None:
        """Stop the stream and wait until the connection is released.

        Cancels the resolver if it is still running. The response, the HTTP
        client and the channel are closed by the time this returns; events
        already on the channel can still be received.
        """
        if not self._task.done():
            self._task.cancel()
        await asyncio.wait({self._task})
