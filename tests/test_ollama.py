import asyncio
import socket
from contextlib import asynccontextmanager

import aiohttp
import pytest
from aiohttp import test_utils, web

from student_api.clients.ollama import GenerationStream, OllamaClient, StreamState, decode_chunk
from student_api.core.errors import (
    UpstreamDecodeError,
    UpstreamError,
    UpstreamProtocolError,
    UpstreamTransportError,
)


def test_stream_concatenates_until_done():
    stream = GenerationStream()
    assert stream.feed({"response": "Hello "}) is StreamState.STREAMING
    assert stream.feed({"response": "world"}) is StreamState.STREAMING
    assert stream.feed({"done": True}) is StreamState.DONE
    assert stream.text == "Hello world"


def test_stream_ignores_chunks_after_done():
    stream = GenerationStream()
    stream.feed({"response": "end", "done": True})
    stream.feed({"response": "ignored"})
    assert stream.state is StreamState.DONE
    assert stream.text == "end"


def test_stream_ignores_wrongly_typed_fields():
    stream = GenerationStream()
    stream.feed({"response": 12, "done": "true"})
    stream.feed({"response": "ok", "model": "llama3.2"})
    assert stream.state is StreamState.STREAMING
    assert stream.text == "ok"


def test_stream_close():
    stream = GenerationStream()
    stream.feed({"response": "partial"})
    stream.close()
    assert stream.state is StreamState.DONE
    assert stream.text == "partial"


def test_decode_chunk():
    assert decode_chunk(b'{"response": "hi", "done": false}\n') == {"response": "hi", "done": False}


@pytest.mark.parametrize("line", [b"{not json", b"[1, 2]", b'"text"', b"\xff\xfe{"])
def test_decode_chunk_rejects_non_objects(line):
    with pytest.raises(UpstreamDecodeError):
        decode_chunk(line)


def streaming_handler(lines, received=None):
    async def handler(request):
        if received is not None:
            received.append(await request.json())
        response = web.StreamResponse(headers={"Content-Type": "application/x-ndjson"})
        await response.prepare(request)
        for line in lines:
            await response.write(line.encode() + b"\n")
        await response.write_eof()
        return response

    return handler


@asynccontextmanager
async def generation_server(handler, timeout=None):
    app = web.Application()
    app.router.add_post("/api/generate", handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
            yield OllamaClient(session, url=str(server.make_url("/api/generate")), model="test-model")
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_generate_hello_world():
    received = []
    lines = ['{"response":"Hello "}', '{"response":"world"}', '{"done":true}']
    async with generation_server(streaming_handler(lines, received)) as client:
        assert await client.generate("describe Ada") == "Hello world"
    assert received == [{"model": "test-model", "prompt": "describe Ada"}]


@pytest.mark.asyncio
async def test_generate_without_done_uses_stream_end():
    lines = ['{"response":"no "}', "", '{"response":"done flag"}']
    async with generation_server(streaming_handler(lines)) as client:
        assert await client.generate("p") == "no done flag"


@pytest.mark.asyncio
async def test_generate_stops_reading_at_done():
    lines = ['{"response":"kept","done":true}', "this is not json", '{"response":"dropped"}']
    async with generation_server(streaming_handler(lines)) as client:
        assert await client.generate("p") == "kept"


@pytest.mark.asyncio
async def test_generate_malformed_chunk():
    lines = ['{"response":"partial"}', "{broken", '{"done":true}']
    async with generation_server(streaming_handler(lines)) as client:
        with pytest.raises(UpstreamDecodeError):
            await client.generate("p")


@pytest.mark.asyncio
async def test_generate_non_200_status():
    async def handler(request):
        return web.json_response({"response": "should not be used", "error": "model not found"}, status=404)

    async with generation_server(handler) as client:
        with pytest.raises(UpstreamProtocolError) as excinfo:
            await client.generate("p")
    assert excinfo.value.status == 404
    assert isinstance(excinfo.value, UpstreamError)


@pytest.mark.asyncio
async def test_generate_timeout_is_transport_error():
    async def handler(request):
        await asyncio.sleep(1)
        return web.Response(text='{"done":true}\n')

    async with generation_server(handler, timeout=0.1) as client:
        with pytest.raises(UpstreamTransportError):
            await client.generate("p")


def unused_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.mark.asyncio
async def test_generate_unreachable_endpoint():
    url = f"http://127.0.0.1:{unused_port()}/api/generate"
    async with aiohttp.ClientSession() as session:
        client = OllamaClient(session, url=url)
        with pytest.raises(UpstreamTransportError):
            await client.generate("p")
