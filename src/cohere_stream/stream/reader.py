"""Line reader over a chunked byte stream."""

from collections.abc import AsyncIterable, AsyncIterator

DEFAULT_MAX_LINE_SIZE = 4096


class LineReader:
    """Reassemble newline-delimited lines from arbitrarily split chunks.

    Lines longer than ``max_line_size`` come back in pieces: each piece but
    the last is returned with ``complete=False`` so the caller can keep
    accumulating. An unterminated tail at end of input is also returned with
    ``complete=False``.
    """

    def __init__(
        self,
        chunks: AsyncIterable[bytes],
        max_line_size: int = DEFAULT_MAX_LINE_SIZE,
    ):
        if max_line_size < 1:
            raise ValueError("max_line_size must be positive")
        self._chunks = chunks.__aiter__()
        self._max_line_size = max_line_size
        self._pending = bytearray()
        self._eof = False
        self._error: Exception | None = None

    async def read_line(self) -> tuple[bytes, bool]:
        """Return the next fragment and whether it ends a logical line.

        Raises:
            EOFError: When the input is exhausted and nothing is pending
            Exception: Whatever the underlying iterator raised, once the
                data read before the failure has been returned
        """
        if self._error is not None:
            error, self._error = self._error, None
            raise error

        while True:
            newline = self._pending.find(b"\n", 0, self._max_line_size + 1)
            if newline >= 0:
                line = bytes(self._pending[:newline])
                del self._pending[: newline + 1]
                if line.endswith(b"\r"):
                    line = line[:-1]
                return line, True

            if len(self._pending) >= self._max_line_size:
                size = self._max_line_size
                # Keep a trailing \r back in case the next byte is \n
                if self._pending[size - 1] == ord("\r") and size > 1:
                    size -= 1
                fragment = bytes(self._pending[:size])
                del self._pending[:size]
                return fragment, False

            if self._eof:
                if self._pending:
                    fragment = bytes(self._pending)
                    self._pending.clear()
                    return fragment, False
                raise EOFError("end of stream")

            try:
                chunk = await self._chunks.__anext__()
            except StopAsyncIteration:
                self._eof = True
                continue
            except Exception as e:
                if not self._pending:
                    raise
                # Hand out what was read before the failure, raise next call
                self._error = e
                fragment = bytes(self._pending)
                self._pending.clear()
                return fragment, False
            self._pending += chunk

    def __aiter__(self) -> AsyncIterator[tuple[bytes, bool]]:
        return self

    async def __anext__(self) -> tuple[bytes, bool]:
        try:
            return await self.read_line()
        except EOFError:
            raise StopAsyncIteration from None
