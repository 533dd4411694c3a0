"""In-memory storage for the development backend.

Keeps chats, their messages and uploaded document text in dictionaries.
Nothing survives a restart.
"""

import logging
import re
import uuid
from datetime import datetime, timezone

from pydantic import BaseModel

from querydocs.models.schemas import ApiChat, ApiMessage

logger = logging.getLogger(__name__)

DEV_USER_ID = "dev-user"
NOT_FOUND_ANSWER = "I couldn't find anything about that in the uploaded documents."

_WORD = re.compile(r"[a-z0-9]{3,}")


def _new_id() -> str:
    return uuid.uuid4().hex[:24]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class StoredDocument(BaseModel):
    """An uploaded document and its extracted text."""

    id: str
    chat_id: str
    filename: str
    text: str


class ChatStore:
    """Dictionary-backed store of chats, messages and documents."""

    def __init__(self) -> None:
        self._chats: dict[str, ApiChat] = {}
        self._messages: dict[str, list[ApiMessage]] = {}
        self._documents: dict[str, list[StoredDocument]] = {}

    def list_chats(self) -> list[ApiChat]:
        """Chats, newest first."""
        return list(reversed(self._chats.values()))

    def get_chat(self, chat_id: str) -> ApiChat | None:
        return self._chats.get(chat_id)

    def create_chat(self, name: str | None = None) -> ApiChat:
        chat = ApiChat(id=_new_id(), user_id=DEV_USER_ID, name=name, created_at=_now())
        self._chats[chat.id] = chat
        self._messages[chat.id] = []
        self._documents[chat.id] = []
        logger.info(f"Created chat {chat.id}")
        return chat

    def delete_chat(self, chat_id: str) -> bool:
        if self._chats.pop(chat_id, None) is None:
            return False
        self._messages.pop(chat_id, None)
        self._documents.pop(chat_id, None)
        logger.info(f"Deleted chat {chat_id}")
        return True

    def get_messages(self, chat_id: str) -> list[ApiMessage] | None:
        messages = self._messages.get(chat_id)
        return list(messages) if messages is not None else None

    def add_message(self, chat_id: str, role: str, text: str) -> ApiMessage:
        message = ApiMessage(
            id=_new_id(),
            chat_id=chat_id,
            role=role,
            text=text,
            created_at=_now(),
        )
        self._messages[chat_id].append(message)
        return message

    def add_document(self, chat_id: str, filename: str, text: str) -> StoredDocument:
        """Store a document and record a system message about it."""
        document = StoredDocument(id=_new_id(), chat_id=chat_id, filename=filename, text=text)
        self._documents[chat_id].append(document)
        self.add_message(chat_id, "system", f"Uploaded document: {filename}")
        return document

    def documents(self, chat_id: str) -> list[StoredDocument]:
        return list(self._documents.get(chat_id, []))


def _words(text: str) -> set[str]:
    return set(_WORD.findall(text.lower()))


def answer_question(question: str, documents: list[StoredDocument]) -> str:
    """Answer with the document passage sharing the most words with the question.

    Passages are the blank-line separated blocks of each document.

    Args:
        question: The user's question.
        documents: Documents attached to the chat.

    Returns:
        The best passage, or NOT_FOUND_ANSWER when nothing overlaps.
    """
    wanted = _words(question)
    best_score = 0
    best_passage = ""
    for document in documents:
        for passage in re.split(r"\n\s*\n", document.text):
            passage = passage.strip()
            score = len(wanted & _words(passage))
            if score > best_score:
                best_score = score
                best_passage = passage

    return best_passage if best_score else NOT_FOUND_ANSWER
