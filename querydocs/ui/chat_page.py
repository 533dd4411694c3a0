"""NiceGUI chat interface driven by the session reconciler."""

from nicegui import events, ui

from querydocs.client import get_chat_api
from querydocs.models import LoadStatus, Message, Origin, ReconciliationState
from querydocs.session import ChatSessionReconciler

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; }
    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }
    .message-user {
        background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }
    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }
    .message-pending { opacity: 0.6; }
    .message-failed { outline: 2px solid #ef4444; }
    .chat-entry-active { background: #eef2ff; }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)

    sidebar_container: ui.column
    messages_container: ui.column
    title_label: ui.label
    input_field: ui.textarea
    send_btn: ui.button

    def refresh() -> None:
        refresh_sidebar()
        refresh_messages()
        title_label.set_text(
            session.active_chat.title if session.active_chat else "QueryDocs AI"
        )
        if session.is_sending:
            send_btn.disable()
        else:
            send_btn.enable()

    def notify_error(message: str) -> None:
        ui.notify(message, type="negative")

    session = ChatSessionReconciler(get_chat_api(), on_change=refresh, on_error=notify_error)

    def refresh_sidebar() -> None:
        sidebar_container.clear()
        with sidebar_container:
            if not session.chats:
                ui.label("No chats yet").classes("text-sm text-gray-400 p-2")
            for chat in session.chats:
                active = session.active_chat is not None and session.active_chat.id == chat.id
                entry = "chat-entry-active" if active else ""
                with ui.row().classes(f"w-full items-center gap-2 px-2 rounded {entry}"):
                    ui.button(
                        chat.title,
                        icon="chat",
                        on_click=lambda c=chat: session.switch_active_chat(c),
                    ).props("flat no-caps align=left").classes("flex-grow truncate")
                    ui.button(
                        icon="delete",
                        on_click=lambda c=chat: session.delete_chat(c.id),
                    ).props("flat round dense color=grey")

    def render_message(msg: Message) -> None:
        if msg.origin == Origin.SYSTEM:
            with ui.row().classes("w-full justify-center items-center gap-1"):
                ui.icon("description").classes("text-gray-400")
                ui.label(msg.content).classes("text-xs text-gray-500 italic")
            return

        is_user = msg.origin == Origin.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        if msg.state == ReconciliationState.PENDING:
            bubble += " message-pending"
        elif msg.state == ReconciliationState.FAILED:
            bubble += " message-failed"

        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[70%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if is_user:
                        ui.label(msg.content).classes("text-sm whitespace-pre-wrap")
                    else:
                        ui.markdown(msg.content).classes("text-sm")
                if msg.state == ReconciliationState.FAILED:
                    with ui.row().classes("self-end items-center gap-2"):
                        ui.label("Not sent").classes("text-xs text-red-500")
                        ui.button(
                            "Retry",
                            on_click=lambda m=msg: session.retry(m.id),
                        ).props("flat dense color=negative size=sm")

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if session.active_chat is None:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("auto_awesome").classes("text-5xl text-gray-300")
                    ui.label("Upload a PDF to start a conversation").classes(
                        "text-lg text-gray-400"
                    )
                return

            if session.load_status == LoadStatus.FAILED:
                with ui.row().classes("w-full items-center justify-between p-3 bg-red-50"):
                    ui.label(f"Could not load messages: {session.load_error}").classes(
                        "text-sm text-red-600"
                    )
                    ui.button(
                        "Retry",
                        on_click=lambda: session.load_history(session.active_chat.id),
                    ).props("flat dense color=negative")
            elif session.load_status == LoadStatus.LOADING and not session.messages:
                ui.spinner(size="lg").classes("self-center")
            elif not session.messages:
                ui.label("Add a document to this chat to ask questions about it").classes(
                    "text-sm text-gray-400 self-center"
                )

            for msg in session.messages:
                render_message(msg)

            if session.is_sending:
                ui.label("Thinking...").classes("text-sm text-gray-500 italic")

    async def handle_upload(e: events.UploadEventArguments) -> None:
        content = await e.file.read()
        await session.upload_document(content, e.file.name)
        uploader.reset()

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or session.is_sending:
            return
        if session.active_chat is None:
            ui.notify("Upload a PDF first", type="warning")
            return
        input_field.value = ""
        await session.send_message(text)

    # === UI Layout ===
    with ui.row().classes("w-full h-screen no-wrap gap-0"):
        # Sidebar
        with ui.column().classes("w-72 h-full bg-white border-r p-3 gap-3"):
            ui.label("QueryDocs AI").classes("text-lg font-semibold")
            ui.button("New Chat", icon="add", on_click=session.new_chat).classes("w-full")
            with ui.scroll_area().classes("flex-grow w-full"):
                sidebar_container = ui.column().classes("w-full gap-1")

        # Main area
        with ui.column().classes("flex-grow h-full gap-0"):
            with ui.row().classes("w-full header px-5 py-4 items-center"):
                ui.icon("description").classes("text-white text-2xl")
                title_label = ui.label("QueryDocs AI").classes(
                    "text-lg font-semibold text-white"
                )

            with (
                ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
                ui.column().classes("w-full p-5"),
            ):
                messages_container = ui.column().classes("w-full gap-4")

            with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
                uploader = (
                    ui.upload(on_upload=handle_upload, auto_upload=True, max_files=1)
                    .props("accept=.pdf flat")
                    .classes("w-48")
                )
                input_field = (
                    ui.textarea(placeholder="Ask about your document...")
                    .props("autogrow outlined dense rows=1")
                    .classes("flex-grow")
                    .on("keydown.enter.prevent", send_message)
                )
                send_btn = ui.button(icon="send", on_click=send_message).props(
                    "round unelevated"
                )

    refresh()
    ui.timer(0.1, session.refresh_chats, once=True)


def main() -> None:
    ui.run(title="QueryDocs AI", port=8080, reload=False)


if __name__ == "__main__":
    main()
