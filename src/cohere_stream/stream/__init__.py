"""Streaming module for the Cohere stream client.

Turns the newline-delimited JSON body of a streaming response into typed
events delivered over a channel.
"""

from .channel import Channel, EventChannel
from .reader import LineReader
from .resolver import resolve

__all__ = ["Channel", "EventChannel", "LineReader", "resolve"]
