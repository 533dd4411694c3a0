"""Chat and document endpoints of the development backend.

Implements the Remote Chat Service contract the client speaks:

    - GET    /chat/list
    - POST   /chat/create
    - GET    /chat/{chat_id}/messages
    - DELETE /chat/{chat_id}
    - POST   /pdf/upload  (multipart: pdf, optional chatId)
    - POST   /pdf/ask
"""

import logging

from fastapi import APIRouter, Depends, Form, HTTPException, Request, UploadFile, status

from querydocs.api.store import ChatStore, answer_question
from querydocs.models.schemas import (
    AskQuestionRequest,
    AskQuestionResponse,
    AskQuestionResult,
    ChatListResponse,
    ChatListResult,
    CreateChatResponse,
    CreateChatResult,
    MessagesResponse,
    MessagesResult,
    StatusResponse,
    UploadResponse,
    UploadResult,
)
from querydocs.parsing import MAX_FILE_SIZE, PDFParseError, inspect_pdf

logger = logging.getLogger(__name__)

chat_router = APIRouter(prefix="/chat", tags=["chat"])
pdf_router = APIRouter(prefix="/pdf", tags=["pdf"])


def get_store(request: Request) -> ChatStore:
    """Store attached to the running application."""
    return request.app.state.store


def _chat_not_found(chat_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Chat not found: {chat_id}",
    )


@chat_router.get("/list", response_model=ChatListResponse)
async def list_chats(store: ChatStore = Depends(get_store)) -> ChatListResponse:
    """List all chats, newest first."""
    return ChatListResponse(
        message="Chats fetched",
        result=ChatListResult(chats=store.list_chats()),
    )


@chat_router.post("/create", response_model=CreateChatResponse)
async def create_chat(store: ChatStore = Depends(get_store)) -> CreateChatResponse:
    """Create an empty, unnamed chat."""
    return CreateChatResponse(
        message="Chat created",
        result=CreateChatResult(chat=store.create_chat()),
    )


@chat_router.get("/{chat_id}/messages", response_model=MessagesResponse)
async def get_messages(chat_id: str, store: ChatStore = Depends(get_store)) -> MessagesResponse:
    """Return the ordered history of a chat.

    Raises:
        404: Unknown chat.
    """
    messages = store.get_messages(chat_id)
    if messages is None:
        raise _chat_not_found(chat_id)
    return MessagesResponse(
        message="Messages fetched",
        result=MessagesResult(messages=messages),
    )


@chat_router.delete("/{chat_id}", response_model=StatusResponse)
async def delete_chat(chat_id: str, store: ChatStore = Depends(get_store)) -> StatusResponse:
    """Delete a chat with its messages and documents.

    Raises:
        404: Unknown chat.
    """
    if not store.delete_chat(chat_id):
        raise _chat_not_found(chat_id)
    return StatusResponse(message="Chat deleted", success=True)


@pdf_router.post("/upload", response_model=UploadResponse)
async def upload_pdf(
    pdf: UploadFile,
    chat_id: str | None = Form(None, alias="chatId"),
    store: ChatStore = Depends(get_store),
) -> UploadResponse:
    """Store a PDF in a new or existing chat.

    Raises:
        400: Missing name, not a PDF, or unreadable.
        404: chatId given but unknown.
        413: File exceeds 10MB.
    """
    filename = pdf.filename
    if not filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )

    content = await pdf.read()
    if len(content) > MAX_FILE_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail="File exceeds maximum allowed size (10MB)",
        )

    try:
        pdf_content = inspect_pdf(content)
    except PDFParseError as e:
        logger.warning(f"PDF parse error for {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    if chat_id:
        if store.get_chat(chat_id) is None:
            raise _chat_not_found(chat_id)
    else:
        chat_id = store.create_chat(name=filename).id

    document = store.add_document(chat_id, filename, pdf_content.text)
    logger.info(f"Stored {filename} ({pdf_content.pages} pages) in chat {chat_id}")

    return UploadResponse(
        message="PDF uploaded",
        data=UploadResult(document_id=document.id, chat_id=chat_id),
    )


@pdf_router.post("/ask", response_model=AskQuestionResponse)
async def ask_question(
    body: AskQuestionRequest,
    store: ChatStore = Depends(get_store),
) -> AskQuestionResponse:
    """Record a question and answer it from the chat's documents.

    Raises:
        404: Unknown chat.
    """
    if store.get_chat(body.chat_id) is None:
        raise _chat_not_found(body.chat_id)

    store.add_message(body.chat_id, "user", body.question)
    answer = answer_question(body.question, store.documents(body.chat_id))
    reply = store.add_message(body.chat_id, "assistant", answer)

    return AskQuestionResponse(
        message="Answer generated",
        result=AskQuestionResult(answer=answer, message_id=reply.id),
    )
