"""Request body construction for the chat and generate endpoints."""

from collections.abc import Sequence
from typing import Any

from .types import (
    CohereConfig,
    ConversationMessage,
    ToolDefinition,
    ToolInvocationResult,
)

DEFAULT_TEMPERATURE = 0.95


def effective_temperature(config: CohereConfig) -> float:
    """Temperature to send, substituting the default when unset (negative)."""
    if config.temperature < 0:
        return DEFAULT_TEMPERATURE
    return config.temperature


def _build_request_body(**kwargs: Any) -> dict[str, Any]:
    """Build request body, omitting None values."""
    return {k: v for k, v in kwargs.items() if v is not None}


def _optional_seed(config: CohereConfig) -> int | None:
    return config.seed if config.seed > 0 else None


def _optional_stop_sequences(config: CohereConfig) -> list[str] | None:
    return list(config.stop_sequences) or None


def render_prompt(
    history: Sequence[ConversationMessage],
    system: str,
    message: str,
) -> str:
    """Flatten a conversation into a single prompt for the generate endpoint.

    The system prompt (if any), one ``role: content`` line per history
    message, and the user message are joined by blank lines.
    """
    parts = []
    if system:
        parts.append(system)
    if history:
        parts.append("\n".join(f"{m.role}: {m.content}" for m in history))
    parts.append(message)
    return "\n\n".join(parts)


def build_chat_payload(
    config: CohereConfig,
    history: Sequence[ConversationMessage],
    system: str,
    message: str,
    tools: Sequence[ToolDefinition] = (),
    tool_results: Sequence[ToolInvocationResult] = (),
) -> dict[str, Any]:
    """Build the body for the chat endpoint."""
    return _build_request_body(
        chat_history=[m.to_wire() for m in history],
        connectors=[],
        message=message,
        model=config.model,
        preamble=system,
        prompt_truncation="OFF",
        stream=True,
        temperature=effective_temperature(config),
        tools=[t.model_dump() for t in tools],
        tool_results=[r.model_dump() for r in tool_results],
        seed=_optional_seed(config),
        safety_mode=config.safety_mode,
        stop_sequences=_optional_stop_sequences(config),
    )


def build_completion_payload(
    config: CohereConfig,
    history: Sequence[ConversationMessage],
    system: str,
    message: str,
) -> dict[str, Any]:
    """Build the body for the generate endpoint."""
    return _build_request_body(
        k=config.top_k,
        model=config.model,
        max_tokens=config.max_tokens,
        prompt=render_prompt(history, system, message),
        raw_prompting=False,
        stream=True,
        temperature=effective_temperature(config),
        stop_sequences=_optional_stop_sequences(config),
    )


def build_payload(
    config: CohereConfig,
    history: Sequence[ConversationMessage],
    system: str,
    message: str,
    tools: Sequence[ToolDefinition] | None = None,
    tool_results: Sequence[ToolInvocationResult] | None = None,
) -> dict[str, Any]:
    """Build the request body for the mode selected by ``config.chat``.

    Tools and tool results only apply to chat mode and are dropped otherwise.

    Args:
        config: Client configuration
        history: Prior conversation, oldest first (may be empty)
        system: System prompt
        message: The user message
        tools: Tool definitions (chat mode only)
        tool_results: Results of earlier tool calls (chat mode only)

    Returns:
        JSON-serializable request body
    """
    if config.chat:
        return build_chat_payload(
            config,
            history,
            system,
            message,
            tools or (),
            tool_results or (),
        )
    return build_completion_payload(config, history, system, message)
