"""Streaming client for the Cohere generation API."""

from .client import reply
from .errors import ChannelClosedError, CohereError
from .payload import (
    DEFAULT_TEMPERATURE,
    build_chat_payload,
    build_completion_payload,
    build_payload,
    effective_temperature,
)
from .stream import Channel, EventChannel, LineReader, resolve
from .types import (
    COMMAND,
    COMMAND_LIGHT,
    COMMAND_LIGHT_NIGHTLY,
    COMMAND_NIGHTLY,
    COMMAND_R,
    COMMAND_R_PLUS,
    CohereConfig,
    ConversationMessage,
    ErrorEvent,
    OutputEvent,
    StreamReply,
    TextEvent,
    ToolDefinition,
    ToolEvent,
    ToolInvocationResult,
)

__all__ = [
    "COMMAND",
    "COMMAND_LIGHT",
    "COMMAND_LIGHT_NIGHTLY",
    "COMMAND_NIGHTLY",
    "COMMAND_R",
    "COMMAND_R_PLUS",
    "DEFAULT_TEMPERATURE",
    "Channel",
    "ChannelClosedError",
    "CohereConfig",
    "CohereError",
    "ConversationMessage",
    "ErrorEvent",
    "EventChannel",
    "LineReader",
    "OutputEvent",
    "StreamReply",
    "TextEvent",
    "ToolDefinition",
    "ToolEvent",
    "ToolInvocationResult",
    "build_chat_payload",
    "build_completion_payload",
    "build_payload",
    "effective_temperature",
    "reply",
    "resolve",
]
