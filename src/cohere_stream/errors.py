"""Error types for the Cohere stream client."""


class CohereError(Exception):
    """Error raised by the Cohere stream client.

    In-stream failures never raise; they arrive on the event channel as
    ErrorEvent values. This type covers request-level failures and misuse.
    """

    def __init__(self, message: str, code: str, raw_text: str | None = None):
        super().__init__(message)
        self.code = code
        self.raw_text = raw_text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {str(self)!r})"


class ChannelClosedError(CohereError):
    """Raised when sending to, closing, or draining a closed channel."""

    def __init__(self, message: str = "channel is closed"):
        super().__init__(message, "CHANNEL_CLOSED")
