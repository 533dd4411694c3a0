"""Data model for chats and their reconciled message lists.

Strict types the session layer works with. Wire payloads are parsed by
``querydocs.models.schemas`` and translated here, so nothing inward of the
client ever sees a raw response.

Models:
    - Origin: Who produced a message
    - ReconciliationState: A message's status relative to the server
    - Chat: A conversation about one or more documents
    - Message: One entry of a chat's session view
    - LoadResult: Outcome of a history load
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from querydocs.models.schemas import ApiChat, ApiMessage


class Origin(str, Enum):
    """Producer of a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"

    @classmethod
    def from_role(cls, role: str) -> "Origin":
        """Map a server role to an origin. Unknown roles are system messages."""
        if role == "user":
            return cls.USER
        if role == "assistant":
            return cls.ASSISTANT
        return cls.SYSTEM


class ReconciliationState(str, Enum):
    """Status of a message relative to server confirmation."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class LoadStatus(str, Enum):
    """State of the active chat's history."""

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class LoadOutcome(str, Enum):
    """What a single history load did."""

    LOADED = "loaded"
    FAILED = "failed"
    STALE = "stale"
    SKIPPED = "skipped"


class Chat(BaseModel):
    """A chat as shown in the chat list.

    Attributes:
        id: Opaque chat identifier.
        title: Display title, fixed at creation.
        created_at: Creation timestamp.
        document_id: Document attached at creation, if known.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str
    created_at: datetime | None = None
    document_id: str | None = None

    @classmethod
    def from_api(cls, chat: ApiChat) -> "Chat":
        title = chat.name or f"Chat {chat.id[-6:]}"
        return cls(id=chat.id, title=title, created_at=chat.created_at)


class Message(BaseModel):
    """One entry in a chat's session view.

    Only ``state`` changes after creation.

    Attributes:
        id: Server id for fetched messages, ``local-<n>`` for local sends.
        origin: Who produced the message.
        content: Message text.
        created_at: Creation timestamp (local clock for local messages).
        state: Reconciliation state.
    """

    id: str = Field(..., min_length=1)
    origin: Origin
    content: str
    created_at: datetime | None = None
    state: ReconciliationState = ReconciliationState.CONFIRMED

    @classmethod
    def from_api(cls, message: ApiMessage) -> "Message":
        return cls(
            id=message.id,
            origin=Origin.from_role(message.role),
            content=message.text,
            created_at=message.created_at,
            state=ReconciliationState.CONFIRMED,
        )


class LoadResult(BaseModel):
    """Result of ``load_history``.

    An empty history is ``LOADED`` with no messages; a failed fetch is
    ``FAILED`` with an error, never an empty list.

    Attributes:
        chat_id: Chat the load was issued for.
        outcome: What happened to the response.
        messages: Session view after the load was applied.
        error: Failure description when outcome is FAILED.
    """

    chat_id: str | None
    outcome: LoadOutcome
    messages: list[Message] = Field(default_factory=list)
    error: str | None = None


__all__ = [
    "Chat",
    "LoadOutcome",
    "LoadResult",
    "LoadStatus",
    "Message",
    "Origin",
    "ReconciliationState",
]
