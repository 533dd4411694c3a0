"""Wire schemas for the Remote Chat Service REST contract.

Every payload crossing the HTTP boundary is parsed into one of these models,
so malformed responses fail loudly at the edge instead of leaking inward.
Field aliases follow the service's camelCase / Mongo-style names.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiModel(BaseModel):
    """Base for wire models: accept aliases or field names, ignore extras."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ApiChat(ApiModel):
    """A chat as listed by the service.

    Attributes:
        id: Opaque chat identifier.
        user_id: Owner of the chat.
        name: Optional display name.
        created_at: Creation timestamp.
    """

    id: str = Field(..., alias="_id", min_length=1)
    user_id: str | None = Field(None, alias="userId")
    name: str | None = None
    created_at: datetime | None = Field(None, alias="createdAt")


class ApiMessage(ApiModel):
    """A stored message of a chat.

    Attributes:
        id: Server-assigned message identifier.
        chat_id: Chat the message belongs to.
        role: Speaker: 'system', 'user' or 'assistant'.
        text: Message text (for 'system', a note about an uploaded document).
        created_at: Creation timestamp.
    """

    id: str = Field(..., alias="_id", min_length=1)
    chat_id: str | None = Field(None, alias="chatId")
    role: str
    text: str
    created_at: datetime | None = Field(None, alias="createdAt")


class ChatListResult(ApiModel):
    chats: list[ApiChat]


class ChatListResponse(ApiModel):
    """Envelope for GET /chat/list."""

    message: str = ""
    success: bool = True
    result: ChatListResult


class CreateChatResult(ApiModel):
    chat: ApiChat


class CreateChatResponse(ApiModel):
    """Envelope for POST /chat/create."""

    message: str = ""
    success: bool = True
    result: CreateChatResult


class MessagesResult(ApiModel):
    messages: list[ApiMessage]

    @field_validator("messages")
    @classmethod
    def reject_duplicate_ids(cls, v: list[ApiMessage]) -> list[ApiMessage]:
        """A history listing the same message twice is malformed."""
        seen: set[str] = set()
        for message in v:
            if message.id in seen:
                raise ValueError(f"Duplicate message id in history: {message.id}")
            seen.add(message.id)
        return v


class MessagesResponse(ApiModel):
    """Envelope for GET /chat/{id}/messages."""

    message: str = ""
    success: bool = True
    result: MessagesResult


class AskQuestionRequest(ApiModel):
    """Request body for POST /pdf/ask.

    Attributes:
        chat_id: Chat the question is asked in.
        question: The user's question.
    """

    chat_id: str = Field(..., alias="chatId", min_length=1)
    question: str = Field(..., min_length=1)


class AskQuestionResult(ApiModel):
    answer: str
    message_id: str | None = Field(None, alias="messageId")


class AskQuestionResponse(ApiModel):
    """Envelope for POST /pdf/ask."""

    message: str = ""
    success: bool = True
    result: AskQuestionResult


class UploadResult(ApiModel):
    """Handles returned after a document upload.

    Attributes:
        document_id: Identifier of the stored document.
        chat_id: Chat the document was attached to (new or existing).
    """

    document_id: str = Field(..., alias="pdfId", min_length=1)
    chat_id: str = Field(..., alias="chatId", min_length=1)


class UploadResponse(ApiModel):
    """Envelope for POST /pdf/upload."""

    success: bool = True
    message: str = ""
    data: UploadResult


class StatusResponse(ApiModel):
    """Bare acknowledgement, also the body of every non-2xx response."""

    message: str
    success: bool = False
