import asyncio
import enum
import json
import logging
from typing import Any, Dict, List

import aiohttp

from student_api.core.errors import (
    UpstreamDecodeError,
    UpstreamProtocolError,
    UpstreamTransportError,
)

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434/api/generate"
DEFAULT_OLLAMA_MODEL = "llama3.2"


class StreamState(enum.Enum):
    STREAMING = "streaming"
    DONE = "done"


class GenerationStream:
    """Accumulates the text fragments of one streamed generation.

    Each chunk may carry a ``response`` fragment and a ``done`` flag. The
    stream moves to DONE on ``done: true`` or when :meth:`close` is called at
    the end of the body; chunks fed after that are ignored.
    """

    def __init__(self) -> None:
        self.state = StreamState.STREAMING
        self._fragments: List[str] = []

    def feed(self, chunk: Dict[str, Any]) -> StreamState:
        if self.state is StreamState.DONE:
            return self.state
        fragment = chunk.get("response")
        if isinstance(fragment, str):
            self._fragments.append(fragment)
        if chunk.get("done") is True:
            self.state = StreamState.DONE
        return self.state

    def close(self) -> None:
        self.state = StreamState.DONE

    @property
    def text(self) -> str:
        return "".join(self._fragments)


def decode_chunk(line: bytes) -> Dict[str, Any]:
    """Parse one newline-delimited JSON chunk of a generation stream."""
    try:
        chunk = json.loads(line)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise UpstreamDecodeError(f"failed to decode chunk: {e}") from e
    if not isinstance(chunk, dict):
        raise UpstreamDecodeError(f"expected a JSON object, got {type(chunk).__name__}")
    return chunk


class OllamaClient:
    """Client for an Ollama-style ``/api/generate`` endpoint.

    The session is owned by the caller (created once at application startup)
    and is shared between requests.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        url: str = DEFAULT_OLLAMA_URL,
        model: str = DEFAULT_OLLAMA_MODEL,
    ):
        self.session = session
        self.url = url
        self.model = model

    def __repr__(self) -> str:
        return f"OllamaClient({self.url}, model={self.model})"

    async def generate(self, prompt: str) -> str:
        """Send ``prompt`` and return the concatenated streamed response.

        Raises:
            UpstreamTransportError: the endpoint could not be reached, the
                connection dropped or the session timeout expired.
            UpstreamProtocolError: the endpoint answered with a non-200 status.
            UpstreamDecodeError: a chunk was not a JSON object.
        """
        payload = {"model": self.model, "prompt": prompt}
        stream = GenerationStream()
        try:
            async with self.session.post(self.url, json=payload) as response:
                if response.status != 200:
                    raise UpstreamProtocolError(response.status)
                async for line in response.content:
                    if not line.strip():
                        continue
                    if stream.feed(decode_chunk(line)) is StreamState.DONE:
                        break
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UpstreamTransportError(f"failed to reach generation service: {e!r}") from e
        stream.close()
        return stream.text
