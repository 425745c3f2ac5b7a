"""Shared fixtures: an in-process JSON server and an in-memory transport."""

import asyncio
import threading

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel

from core.request_types import JsonRequest, TransportResponse
from services.fetcher import JsonFetcher
from services.transport import HttpxTransport

BASE_URL = "http://testserver"

POSTS_PAYLOAD = {
    "users": [{"userId": 32}, {"userId": 2}],
    "colors": [{"name": "blue"}, {"name": "red"}],
    "user": {"name": {"firstname": "henning", "lastname": "mankel"}},
}


class Post(BaseModel):
    userId: int


class Name(BaseModel):
    firstname: str
    lastname: str


def create_fixture_app() -> FastAPI:
    """JSON endpoints the fetcher is exercised against."""
    app = FastAPI()

    @app.get("/posts")
    async def get_posts():
        return POSTS_PAYLOAD

    @app.post("/posts")
    async def echo_posts(request: Request):
        return JSONResponse(await request.json())

    @app.get("/badjson")
    async def bad_json():
        return HTMLResponse("this is not json")

    @app.get("/empty")
    async def empty():
        return Response(status_code=200)

    return app


class CannedTransport:
    """Transport double returning a fixed response."""

    def __init__(
        self,
        status_code: int | None = 200,
        content: bytes | None = b"{}",
        error: BaseException | None = None,
        *,
        delay: float = 0.0,
        raises: Exception | None = None,
    ) -> None:
        self.response = TransportResponse(status_code, content, error)
        self.delay = delay
        self.raises = raises
        self.requests: list[JsonRequest] = []

    async def send(self, request: JsonRequest) -> TransportResponse:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raises is not None:
            raise self.raises
        return self.response


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def canned():
    return CannedTransport


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=create_fixture_app())
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest.fixture
async def fetcher(client):
    return JsonFetcher(HttpxTransport(client))


@pytest.fixture
def background_loop():
    """An event loop running on its own thread."""
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, name="background-loop", daemon=True)
    thread.start()
    try:
        yield loop
    finally:
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=5)
        loop.close()
