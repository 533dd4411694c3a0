"""Unit tests for wire schemas and their translation into the data model."""

import pytest
import pytest_check as check
from pydantic import ValidationError

from querydocs.models import Chat, Message, Origin, ReconciliationState
from querydocs.models.schemas import (
    ApiChat,
    ApiMessage,
    AskQuestionRequest,
    ChatListResponse,
    MessagesResponse,
    UploadResponse,
)


class TestMessagesResponse:
    """Tests for parsing GET /chat/{id}/messages payloads."""

    def test_parses_service_payload(self) -> None:
        """Mongo-style ids and camelCase fields map onto the model."""
        payload = {
            "message": "ok",
            "success": True,
            "result": {
                "messages": [
                    {
                        "_id": "m1",
                        "chatId": "c1",
                        "role": "user",
                        "text": "hi",
                        "createdAt": "2024-05-01T10:00:00Z",
                        "__v": 0,
                    }
                ]
            },
        }

        envelope = MessagesResponse.model_validate(payload)
        message = envelope.result.messages[0]

        check.equal(message.id, "m1")
        check.equal(message.chat_id, "c1")
        check.equal(message.role, "user")
        check.equal(message.text, "hi")
        check.equal(message.created_at.year, 2024)

    def test_rejects_duplicate_ids(self) -> None:
        """A history that lists a message twice is malformed."""
        payload = {
            "result": {
                "messages": [
                    {"_id": "m1", "role": "user", "text": "a"},
                    {"_id": "m1", "role": "assistant", "text": "b"},
                ]
            }
        }

        with pytest.raises(ValidationError, match="Duplicate message id"):
            MessagesResponse.model_validate(payload)

    def test_rejects_missing_text(self) -> None:
        payload = {"result": {"messages": [{"_id": "m1", "role": "user"}]}}

        with pytest.raises(ValidationError):
            MessagesResponse.model_validate(payload)

    def test_rejects_missing_result(self) -> None:
        with pytest.raises(ValidationError):
            MessagesResponse.model_validate({"message": "ok", "success": True})


class TestOtherEnvelopes:
    def test_chat_list_allows_unnamed_chats(self) -> None:
        payload = {"result": {"chats": [{"_id": "abc123456", "userId": "u1"}]}}

        chats = ChatListResponse.model_validate(payload).result.chats

        assert chats[0].name is None

    def test_upload_response_reads_data_block(self) -> None:
        payload = {"success": True, "message": "done", "data": {"pdfId": "p1", "chatId": "c1"}}

        data = UploadResponse.model_validate(payload).data

        check.equal(data.document_id, "p1")
        check.equal(data.chat_id, "c1")

    def test_ask_request_serializes_with_service_names(self) -> None:
        body = AskQuestionRequest(chat_id="c1", question="What is the total?")

        assert body.model_dump(by_alias=True) == {"chatId": "c1", "question": "What is the total?"}

    def test_ask_request_rejects_empty_question(self) -> None:
        with pytest.raises(ValidationError):
            AskQuestionRequest(chat_id="c1", question="")


class TestDomainTranslation:
    """Tests for mapping wire models into Chat and Message."""

    @pytest.mark.parametrize(
        ("role", "origin"),
        [
            ("user", Origin.USER),
            ("assistant", Origin.ASSISTANT),
            ("system", Origin.SYSTEM),
            ("tool", Origin.SYSTEM),
        ],
    )
    def test_role_to_origin(self, role: str, origin: Origin) -> None:
        assert Origin.from_role(role) is origin

    def test_message_from_api_is_confirmed(self) -> None:
        message = Message.from_api(ApiMessage(id="m1", role="assistant", text="hello"))

        check.equal(message.origin, Origin.ASSISTANT)
        check.equal(message.content, "hello")
        check.equal(message.state, ReconciliationState.CONFIRMED)

    def test_chat_title_uses_name(self) -> None:
        chat = Chat.from_api(ApiChat(id="665f1c2ab8", name="contract.pdf"))

        assert chat.title == "contract.pdf"

    def test_chat_title_falls_back_to_id_suffix(self) -> None:
        chat = Chat.from_api(ApiChat(id="665f1c2ab8e4d9"))

        assert chat.title == "Chat b8e4d9"

    def test_chat_is_immutable(self) -> None:
        chat = Chat(id="c1", title="first")

        with pytest.raises(ValidationError):
            chat.title = "renamed"
