"""Async REST client for the Remote Chat Service.

Wraps ``httpx.AsyncClient`` with:
- Bearer token and base URL from ClientConfig
- Response validation into the wire schemas
- A single error type for every failure mode

The client knows nothing about sessions or active chats. It turns HTTP calls
into typed values or raises ChatApiError; the session layer decides what a
failure means.
"""

import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel

from querydocs.client.config import ClientConfig, get_client_config
from querydocs.models.schemas import (
    ApiChat,
    ApiMessage,
    AskQuestionRequest,
    AskQuestionResponse,
    ChatListResponse,
    CreateChatResponse,
    MessagesResponse,
    UploadResponse,
    UploadResult,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class ChatApiError(Exception):
    """Raised when a request to the chat service fails.

    Attributes:
        status_code: HTTP status of the failed response, None for transport errors.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(ChatApiError):
    """Raised when a response does not match the expected schema."""

    pass


def _error_message(response: httpx.Response) -> str:
    """Pull the server's error text out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if isinstance(message, str) and message:
            return message
    return f"HTTP {response.status_code}"


class ChatApiClient:
    """Typed client for the chat and document endpoints."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
            transport: Optional httpx transport (ASGI or mock transports in tests).
        """
        self._config = config or get_client_config()
        headers = {"Accept": "application/json"}
        if self._config.api_token:
            headers["Authorization"] = f"Bearer {self._config.api_token}"
        self._client = httpx.AsyncClient(
            base_url=self._config.api_base_url,
            headers=headers,
            timeout=self._config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ChatApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, path: str, **kwargs: object) -> httpx.Response:
        """Send a request and raise ChatApiError for transport or HTTP errors."""
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ChatApiError(f"Connection failed: {e}") from e

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise ChatApiError(message, status_code=response.status_code)

        return response

    async def _request(
        self,
        method: str,
        path: str,
        response_model: type[ResponseT],
        **kwargs: object,
    ) -> ResponseT:
        response = await self._send(method, path, **kwargs)
        try:
            return response_model.model_validate(response.json())
        except ValueError as e:
            logger.warning(f"Malformed response from {method} {path}: {e}")
            raise MalformedResponseError(f"Malformed response from {path}: {e}") from e

    async def list_chats(self) -> list[ApiChat]:
        """List the user's chats."""
        envelope = await self._request("GET", "/chat/list", ChatListResponse)
        return envelope.result.chats

    async def create_chat(self) -> ApiChat:
        """Create an empty chat."""
        envelope = await self._request("POST", "/chat/create", CreateChatResponse)
        return envelope.result.chat

    async def get_messages(self, chat_id: str) -> list[ApiMessage]:
        """Fetch the ordered message history of a chat.

        Args:
            chat_id: Chat identifier.

        Returns:
            Messages in server order.

        Raises:
            ChatApiError: On transport or HTTP failure.
            MalformedResponseError: If the payload is malformed or repeats ids.
        """
        envelope = await self._request("GET", f"/chat/{chat_id}/messages", MessagesResponse)
        return envelope.result.messages

    async def ask_question(self, chat_id: str, question: str) -> str:
        """Ask a question in a chat and return the answer text.

        Args:
            chat_id: Chat identifier.
            question: The user's question.

        Returns:
            The assistant's answer.
        """
        body = AskQuestionRequest(chat_id=chat_id, question=question)
        envelope = await self._request(
            "POST",
            "/pdf/ask",
            AskQuestionResponse,
            json=body.model_dump(by_alias=True),
        )
        return envelope.result.answer

    async def upload_pdf(
        self,
        content: bytes,
        filename: str,
        chat_id: str | None = None,
    ) -> UploadResult:
        """Upload a PDF, optionally attaching it to an existing chat.

        Args:
            content: Raw PDF bytes.
            filename: Original file name.
            chat_id: Existing chat to attach to. A new chat is created if omitted.

        Returns:
            UploadResult with the document and chat identifiers.
        """
        data = {"chatId": chat_id} if chat_id else None
        envelope = await self._request(
            "POST",
            "/pdf/upload",
            UploadResponse,
            files={"pdf": (filename, content, "application/pdf")},
            data=data,
        )
        return envelope.data

    async def delete_chat(self, chat_id: str) -> None:
        """Delete a chat and its messages."""
        await self._send("DELETE", f"/chat/{chat_id}")


# Module-level singleton instance
_chat_api: ChatApiClient | None = None


def get_chat_api() -> ChatApiClient:
    """Get or create the global chat service client.

    Returns:
        The ChatApiClient instance.
    """
    global _chat_api
    if _chat_api is None:
        _chat_api = ChatApiClient()
    return _chat_api
