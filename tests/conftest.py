################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
"""Pytest's requirement to share fixtures across test files.
"""
import asyncio
import contextlib
import json
import threading
import typing as t
from dataclasses import dataclass
from pathlib import Path

import pytest
from aiohttp import web

from envase.sdk._base._config import ConfigStore, InMemoryAdapter
from envase.sdk._base._crypto import EncryptionService

# (status, body). ``body`` is dumped to JSON unless it's ``bytes``; ``None`` means
# an empty response.
Reply = t.Tuple[int, t.Any]


@dataclass
class RecordedRequest:
    method: str
    path: str
    query: t.Dict[str, str]
    headers: t.Mapping[str, str]
    body: t.Any


class FakeApi:
    """
    A real HTTP server on an ephemeral localhost port that answers with scripted
    replies. Each route replays its replies in order and then keeps repeating the
    last one.
    """

    def __init__(self):
        self.requests: t.List[RecordedRequest] = []
        self._replies: t.Dict[t.Tuple[str, str], t.List[Reply]] = {}
        self._delays: t.Dict[t.Tuple[str, str], float] = {}

    def add(self, method: str, path: str, *replies: Reply, delay: float = 0.0):
        self._replies[(method, path)] = list(replies)
        self._delays[(method, path)] = delay

    def requests_to(self, method: str, path: str) -> t.List[RecordedRequest]:
        return [r for r in self.requests if r.method == method and r.path == path]

    async def _handle(self, request: web.Request) -> web.StreamResponse:
        raw = await request.text()
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=request.path,
                query=dict(request.query),
                headers=request.headers.copy(),
                body=json.loads(raw) if raw else None,
            )
        )

        key = (request.method, request.path)
        replies = self._replies.get(key)
        if not replies:
            return web.json_response({"error": "Not found"}, status=404)

        if self._delays[key]:
            await asyncio.sleep(self._delays[key])

        status, body = replies.pop(0) if len(replies) > 1 else replies[0]
        if body is None:
            return web.Response(status=status)
        if isinstance(body, bytes):
            return web.Response(status=status, body=body)
        return web.json_response(body, status=status)

    @contextlib.asynccontextmanager
    async def serve(self) -> t.AsyncIterator[str]:
        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self._handle)
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", 0)
        await site.start()
        port = runner.addresses[0][1]
        try:
            yield f"http://127.0.0.1:{port}"
        finally:
            await runner.cleanup()

    @contextlib.contextmanager
    def serve_in_thread(self) -> t.Iterator[str]:
        """
        Like ``serve()``, but the server runs on its own event loop in a background
        thread. Needed by code that calls ``asyncio.run()`` itself.
        """
        loop = asyncio.new_event_loop()
        thread = threading.Thread(target=loop.run_forever, daemon=True)
        thread.start()
        server = self.serve()
        url = asyncio.run_coroutine_threadsafe(server.__aenter__(), loop).result()
        try:
            yield url
        finally:
            asyncio.run_coroutine_threadsafe(
                server.__aexit__(None, None, None), loop
            ).result()
            loop.call_soon_threadsafe(loop.stop)
            thread.join()
            loop.close()


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def encryption_key() -> str:
    return EncryptionService.generate_key()


@pytest.fixture
def config_store() -> ConfigStore:
    return ConfigStore(InMemoryAdapter(Path("/tmp/envase-tests/config.json")))


@pytest.fixture
def patch_config_location(tmp_path, monkeypatch):
    """
    Makes ``ConfigStore()`` read/write the config file in a temporary directory.
    """
    config_location = tmp_path / "config.json"
    monkeypatch.setenv("ENVASE_CONFIG_PATH", str(config_location))
    return tmp_path
