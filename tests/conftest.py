"""Pytest fixtures and shared test configuration.

Fixtures:
    - make_pdf: Factory producing PDF bytes with pypdf
    - sample_pdf: A one-page PDF with a title
    - store: Empty in-memory chat store
    - backend: Development backend serving that store
    - async_client: HTTPX client for raw API requests
    - client_config: Client configuration pointing at the test backend
    - chat_api: ChatApiClient wired to the backend through ASGI transport
"""

import io
from collections.abc import AsyncIterator, Callable

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pypdf import PdfWriter

from querydocs.api import ChatStore, create_app
from querydocs.client import ChatApiClient, ClientConfig


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Return a factory building PDFs in memory.

    Returns:
        Function taking a page count and optional title, returning PDF bytes.
    """

    def _make(pages: int = 1, title: str | None = None) -> bytes:
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=612, height=792)
        if title:
            writer.add_metadata({"/Title": title})
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()

    return _make


@pytest.fixture
def sample_pdf(make_pdf: Callable[..., bytes]) -> bytes:
    return make_pdf(pages=1, title="Quarterly report")


@pytest.fixture
def store() -> ChatStore:
    return ChatStore()


@pytest.fixture
def backend(store: ChatStore) -> FastAPI:
    return create_app(store)


@pytest.fixture
async def async_client(backend: FastAPI) -> AsyncIterator[AsyncClient]:
    """Create async HTTP client for raw API requests.

    Yields:
        AsyncClient bound to the development backend.
    """
    transport = ASGITransport(app=backend)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(
        api_base_url="http://test/api",
        api_token="test-token",
        timeout=5.0,
    )


@pytest.fixture
async def chat_api(
    backend: FastAPI,
    client_config: ClientConfig,
) -> AsyncIterator[ChatApiClient]:
    """Create a ChatApiClient talking to the development backend.

    Yields:
        Open client, closed after the test.
    """
    async with ChatApiClient(client_config, transport=ASGITransport(app=backend)) as client:
        yield client
