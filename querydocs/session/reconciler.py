"""Chat session reconciler.

Owns the active chat and its ordered message list, and merges three sources
into it:

1. Server history, fetched whenever a chat is (re)selected. It replaces the
   view wholesale.
2. Optimistic user messages, appended as ``pending`` the moment they are sent.
3. The assistant's reply, appended when the question call completes, or the
   ``failed`` mark on the user message when it does not.

Every network completion is checked before it touches the view. A history
response applies only if it answers the latest load of the still-active chat;
an answer applies only if its question is still in the view. Anything else is
dropped, which is the only cancellation mechanism: requests are never aborted,
their results are just discarded.

Questions still awaiting an answer are remembered per chat, so leaving a chat
and coming back before the answer arrives shows them again.

Expected failures (load, send, upload, delete) never raise out of an
operation. They become explicit state (``LoadResult``, a ``failed`` message,
a rolled-back chat list) and are reported through ``on_error``. A duplicate
message id in the view raises SessionInvariantError, since it can only come
from a bug.
"""

import itertools
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from querydocs.client.chat_api import ChatApiClient, ChatApiError
from querydocs.models import (
    Chat,
    LoadOutcome,
    LoadResult,
    LoadStatus,
    Message,
    Origin,
    ReconciliationState,
)
from querydocs.models.schemas import UploadResult
from querydocs.parsing import PDFParseError, inspect_pdf

logger = logging.getLogger(__name__)


class SessionInvariantError(RuntimeError):
    """Raised when the session view would break one of its invariants."""

    pass


class ChatSessionReconciler:
    """Authoritative view of the messages of the active chat.

    All methods are meant to be called from a single event loop. Appends are
    sequential, so no locking is needed; correctness across chat switches
    relies on discarding stale responses.

    Attributes:
        load_status: State of the active chat's history.
        load_error: Failure text of the last history load, if it failed.
    """

    def __init__(
        self,
        api: ChatApiClient,
        on_change: Callable[[], None] | None = None,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize an empty session.

        Args:
            api: Client for the Remote Chat Service.
            on_change: Called after every change of observable state.
            on_error: Called with user-facing text when an operation fails.
        """
        self._api = api
        self._on_change = on_change
        self._on_error = on_error
        self._active_chat: Chat | None = None
        self._messages: list[Message] = []
        self._chats: list[Chat] = []
        self._local_ids = itertools.count(1)
        self._outstanding_sends = 0
        self._in_flight: dict[str, list[Message]] = {}
        self._load_seq = 0
        self.load_status = LoadStatus.IDLE
        self.load_error: str | None = None

    @property
    def active_chat(self) -> Chat | None:
        return self._active_chat

    @property
    def messages(self) -> list[Message]:
        """The session view, in insertion order."""
        return list(self._messages)

    @property
    def chats(self) -> list[Chat]:
        return list(self._chats)

    @property
    def is_sending(self) -> bool:
        """True while a question is awaiting its answer."""
        return self._outstanding_sends > 0

    @property
    def retry_content(self) -> str | None:
        """Content of the most recent failed send, if any."""
        failed = self._find_failed()
        return failed.content if failed else None

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def _report(self, message: str) -> None:
        logger.warning(message)
        if self._on_error is not None:
            self._on_error(message)

    def _is_active(self, chat_id: str) -> bool:
        return self._active_chat is not None and self._active_chat.id == chat_id

    def _next_local_id(self) -> str:
        return f"local-{next(self._local_ids)}"

    def _append(self, message: Message) -> None:
        if any(existing.id == message.id for existing in self._messages):
            raise SessionInvariantError(f"Message id already in session view: {message.id}")
        self._messages.append(message)

    def _in_view(self, message: Message) -> bool:
        return any(existing is message for existing in self._messages)

    def _clear_view(self) -> None:
        self._messages = []
        self.load_status = LoadStatus.IDLE
        self.load_error = None

    def _find_failed(self, message_id: str | None = None) -> Message | None:
        for message in reversed(self._messages):
            if message.state != ReconciliationState.FAILED:
                continue
            if message_id is None or message.id == message_id:
                return message
        return None

    def _activate_new(self, chat: Chat) -> None:
        self._chats = [chat] + [c for c in self._chats if c.id != chat.id]
        self._active_chat = chat
        self._clear_view()

    def _finish_send(self, chat_id: str, message: Message) -> None:
        self._outstanding_sends -= 1
        pending = self._in_flight.get(chat_id, [])
        if any(m is message for m in pending):
            pending.remove(message)
        if not pending:
            self._in_flight.pop(chat_id, None)
        if message.state == ReconciliationState.PENDING:
            # Cancelled before the answer arrived.
            message.state = ReconciliationState.FAILED
            self._notify()

    def _stale(self, chat_id: str) -> LoadResult:
        logger.debug(f"Discarding stale history for chat {chat_id}")
        return LoadResult(chat_id=chat_id, outcome=LoadOutcome.STALE, messages=self.messages)

    async def load_history(self, chat_id: str | None) -> LoadResult:
        """Replace the view with the server history of the active chat.

        Pending and failed local messages that the server does not know are
        kept after the server history, so a refetch never loses a send. A
        pending message is dropped when the history already ends with the
        same question unanswered, since the service stored it first.

        Args:
            chat_id: Chat to load. Must be the active chat.

        Returns:
            LoadResult. SKIPPED when there is no active chat, STALE when the
            chat stopped being active or a newer load started before the
            response arrived, FAILED with an error when the fetch failed.
        """
        if self._active_chat is None or not chat_id:
            self._clear_view()
            self._notify()
            return LoadResult(chat_id=chat_id, outcome=LoadOutcome.SKIPPED)

        if not self._is_active(chat_id):
            return self._stale(chat_id)

        self._load_seq += 1
        seq = self._load_seq
        self.load_status = LoadStatus.LOADING
        self.load_error = None
        self._notify()

        try:
            api_messages = await self._api.get_messages(chat_id)
        except ChatApiError as e:
            if not self._is_active(chat_id) or seq != self._load_seq:
                return self._stale(chat_id)
            self.load_status = LoadStatus.FAILED
            self.load_error = str(e)
            self._report(f"Failed to load messages: {e}")
            self._notify()
            return LoadResult(
                chat_id=chat_id,
                outcome=LoadOutcome.FAILED,
                messages=self.messages,
                error=self.load_error,
            )

        if not self._is_active(chat_id) or seq != self._load_seq:
            return self._stale(chat_id)

        history = [Message.from_api(m) for m in api_messages]
        server_ids = {m.id for m in history}
        unanswered: set[str] = set()
        for message in reversed(history):
            if message.origin != Origin.USER:
                break
            unanswered.add(message.content)

        carried = [
            m
            for m in self._messages
            if m.state != ReconciliationState.CONFIRMED
            and m.id not in server_ids
            and not (m.state == ReconciliationState.PENDING and m.content in unanswered)
        ]

        self._messages = []
        for message in history + carried:
            self._append(message)

        self.load_status = LoadStatus.LOADED
        self._notify()
        return LoadResult(chat_id=chat_id, outcome=LoadOutcome.LOADED, messages=self.messages)

    async def send_message(self, content: str) -> Message | None:
        """Send a question in the active chat.

        The user message is appended as pending before the call is made. On
        success it is confirmed and the answer appended after it; on failure
        it is marked failed and stays in the view. If the task is cancelled
        while waiting, the message is marked failed before the cancellation
        propagates.

        Args:
            content: Question text, sent exactly as given.

        Returns:
            The user message, or None when there is no active chat or the
            content is blank.
        """
        if self._active_chat is None:
            logger.debug("No active chat, ignoring send")
            return None
        if not content.strip():
            return None

        chat_id = self._active_chat.id
        user_message = Message(
            id=self._next_local_id(),
            origin=Origin.USER,
            content=content,
            created_at=datetime.now(timezone.utc),
            state=ReconciliationState.PENDING,
        )
        self._append(user_message)
        self._outstanding_sends += 1
        self._in_flight.setdefault(chat_id, []).append(user_message)
        self._notify()

        failure: ChatApiError | None = None
        try:
            answer = await self._api.ask_question(chat_id, content)
        except ChatApiError as e:
            failure = e
            user_message.state = ReconciliationState.FAILED
        else:
            user_message.state = ReconciliationState.CONFIRMED
        finally:
            self._finish_send(chat_id, user_message)

        if not self._is_active(chat_id):
            logger.debug(f"Discarding stale answer for chat {chat_id}")
            self._notify()
            return user_message

        if failure is not None:
            if not self._in_view(user_message):
                self._append(user_message)
            self._report(f"Failed to get AI response: {failure}")
            self._notify()
            return user_message

        if not self._in_view(user_message):
            # A reload replaced the question with the service's copy.
            await self.load_history(chat_id)
            return user_message

        self._append(
            Message(
                id=self._next_local_id(),
                origin=Origin.ASSISTANT,
                content=answer,
                created_at=datetime.now(timezone.utc),
                state=ReconciliationState.CONFIRMED,
            )
        )
        self._notify()
        return user_message

    async def retry(self, message_id: str | None = None) -> Message | None:
        """Resend the content of a failed message as a new message.

        The failed message stays in the view as history.

        Args:
            message_id: Failed message to retry. Defaults to the latest one.

        Returns:
            The new user message, or None if there is nothing to retry.
        """
        failed = self._find_failed(message_id)
        if failed is None:
            return None
        return await self.send_message(failed.content)

    async def switch_active_chat(self, chat: Chat | None) -> LoadResult:
        """Make ``chat`` the active chat and load its history.

        Switching to a different chat clears the view first. Reselecting the
        active chat keeps the view and reloads it in place.
        """
        previous = self._active_chat
        self._active_chat = chat
        if chat is None:
            return await self.load_history(None)

        if previous is None or previous.id != chat.id:
            self._clear_view()
            for message in self._in_flight.get(chat.id, []):
                self._append(message)
        self._notify()
        return await self.load_history(chat.id)

    def new_chat(self) -> None:
        """Deselect the active chat so the next upload starts a new one."""
        self._active_chat = None
        self._clear_view()
        self._notify()

    def create_from_upload(self, upload: UploadResult, filename: str) -> Chat:
        """Activate the chat a document upload created.

        Args:
            upload: Handles returned by the upload.
            filename: Uploaded file name, used as the chat title.

        Returns:
            The new active chat, with an empty view.
        """
        chat = Chat(
            id=upload.chat_id,
            title=filename,
            created_at=datetime.now(timezone.utc),
            document_id=upload.document_id,
        )
        self._activate_new(chat)
        logger.info(f"Created chat {chat.id} from upload of {filename}")
        self._notify()
        return chat

    async def create_chat(self) -> Chat | None:
        """Create an empty chat on the server and make it active."""
        try:
            api_chat = await self._api.create_chat()
        except ChatApiError as e:
            self._report(f"Failed to create chat: {e}")
            return None

        chat = Chat.from_api(api_chat)
        self._activate_new(chat)
        logger.info(f"Created chat {chat.id}")
        self._notify()
        return chat

    async def refresh_chats(self) -> bool:
        """Reload the chat list. The previous list is kept on failure."""
        try:
            api_chats = await self._api.list_chats()
        except ChatApiError as e:
            self._report(f"Failed to load chats: {e}")
            return False

        self._chats = [Chat.from_api(c) for c in api_chats]
        self._notify()
        return True

    async def delete_chat(self, chat_id: str) -> bool:
        """Delete a chat with an optimistic, reversible list update.

        The chat disappears from the list immediately. If the server refuses,
        the saved list is restored. Once the server confirms, the active
        pointer and view are cleared if the chat was active.

        Returns:
            True if the chat was deleted.
        """
        pre_image = list(self._chats)
        self._chats = [c for c in self._chats if c.id != chat_id]
        self._notify()

        try:
            await self._api.delete_chat(chat_id)
        except ChatApiError as e:
            self._chats = pre_image
            self._report(f"Failed to delete chat: {e}")
            self._notify()
            return False

        if self._is_active(chat_id):
            self._active_chat = None
            self._clear_view()
        logger.info(f"Deleted chat {chat_id}")
        self._notify()
        return True

    async def upload_document(self, content: bytes, filename: str) -> Chat | None:
        """Validate and upload a PDF.

        With an active chat the document is attached to it and its history
        reloaded. Without one, the upload creates a chat that becomes active.

        Args:
            content: Raw PDF bytes.
            filename: Original file name.

        Returns:
            The chat the document belongs to, or None if the upload failed.
        """
        try:
            inspect_pdf(content)
        except PDFParseError as e:
            self._report(f"Cannot upload {filename}: {e}")
            return None

        target = self._active_chat
        try:
            upload = await self._api.upload_pdf(
                content,
                filename,
                chat_id=target.id if target else None,
            )
        except ChatApiError as e:
            self._report(f"Failed to upload {filename}: {e}")
            return None

        if target is not None:
            chat = target
            if self._is_active(chat.id):
                await self.load_history(chat.id)
        elif self._active_chat is None:
            chat = self.create_from_upload(upload, filename)
            await self.load_history(chat.id)
        else:
            # Another chat was selected while uploading; list the new one only.
            chat = Chat(id=upload.chat_id, title=filename, document_id=upload.document_id)
            self._chats = [chat] + [c for c in self._chats if c.id != chat.id]
            self._notify()

        await self.refresh_chats()
        return chat

    def reset(self) -> None:
        """Forget everything, as on logout."""
        self._active_chat = None
        self._chats = []
        self._clear_view()
        self._notify()
