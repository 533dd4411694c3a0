"""HTTP client for the Remote Chat Service.

Responsibilities:
    - Configuration of base URL, token and timeout
    - Typed calls for chats, messages, questions and uploads
    - Validation of every response at the boundary

Maintains clean separation from session state.
"""

from querydocs.client.chat_api import (
    ChatApiClient,
    ChatApiError,
    MalformedResponseError,
    get_chat_api,
)
from querydocs.client.config import ClientConfig, get_client_config

__all__ = [
    "ChatApiClient",
    "ChatApiError",
    "ClientConfig",
    "MalformedResponseError",
    "get_chat_api",
    "get_client_config",
]
