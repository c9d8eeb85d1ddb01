"""NiceGUI chat interface for the advisor.

Renders the session's conversation log and forwards input to the
RequestSubmitter. All request and polling logic lives in advisor_chat.chat.
"""

import logging

from nicegui import ui

from advisor_chat.api.client import AdvisorAPIClient
from advisor_chat.chat.conversation import ChatSession
from advisor_chat.chat.submitter import RequestSubmitter
from advisor_chat.config import get_client_config
from advisor_chat.models.schemas import Message, Sender
from advisor_chat.ui.formatting import format_timestamp, message_to_html

logger = logging.getLogger(__name__)

APP_TITLE = "UK SME Tax & Accounting Advisor"

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<link href="https://fonts.googleapis.com/icon?family=Material+Icons" rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f8fafc; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: rgba(255, 255, 255, 0.7); border-bottom: 1px solid #e2e8f0; }

    .message-user {
        background: #4f46e5;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: white;
        color: #1e293b;
        border: 1px solid #e2e8f0;
        border-radius: 18px 18px 18px 4px;
    }

    .message-error {
        background: #fef2f2;
        color: #991b1b;
        border: 1px solid #f87171;
        border-radius: 18px 18px 18px 4px;
    }

    .avatar-user { background: #4f46e5; }
    .avatar-assistant { background: #0d9488; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #0d9488;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .citation {
        display: inline-flex;
        align-items: center;
        gap: 4px;
        margin: 0 2px;
        padding: 1px 8px;
        border-radius: 9999px;
        background: #f0fdfa;
        color: #0f766e;
        font-size: 0.75rem;
        font-weight: 500;
    }
    .citation-icon { width: 12px; height: 12px; }

    .input-box {
        background: #f9fafb;
        border: 1px solid #cbd5e1;
        border-radius: 12px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #0d9488; }

    .send-btn { background: #4f46e5 !important; }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    config = get_client_config()
    client = AdvisorAPIClient(config)
    session = ChatSession(config.welcome_message)
    submitter = RequestSubmitter(client, session, config)

    messages_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "account_balance"
        avatar_classes = f"w-9 h-9 rounded-full flex items-center justify-center {css}"
        with ui.element("div").classes(avatar_classes):
            ui.icon(icon).classes("text-white text-lg")

    def render_status(msg: Message) -> None:
        with ui.row().classes("w-full justify-start gap-3 items-end"):
            render_avatar(False)
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("items-center gap-2"):
                    with ui.row().classes("gap-1"):
                        for _ in range(3):
                            ui.element("div").classes("typing-dot")
                    ui.label(msg.text).classes("text-sm text-gray-500 italic")

    def render_message(msg: Message) -> None:
        if msg.is_status:
            render_status(msg)
            return

        is_user = msg.sender == Sender.USER
        align = "justify-end" if is_user else "justify-start"
        if is_user:
            bubble = "message-user"
        elif msg.is_error:
            bubble = "message-error"
        else:
            bubble = "message-assistant"

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[80%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    ui.html(message_to_html(msg), sanitize=False).classes(
                        "text-sm leading-relaxed"
                    )
                ui.label(format_timestamp(msg.timestamp)).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )
            if is_user:
                render_avatar(True)

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            for msg in session.conversation:
                render_message(msg)
        busy = session.is_awaiting_response
        send_btn.set_enabled(not busy)
        input_field.set_enabled(not busy)

    def on_change() -> None:
        refresh_messages()
        scroll_area.scroll_to(percent=1.0)

    def bind_session(new_session: ChatSession) -> None:
        nonlocal session, submitter
        session = new_session
        submitter = RequestSubmitter(client, session, config)
        session.conversation.subscribe(on_change)
        on_change()

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or session.is_awaiting_response:
            return
        input_field.value = ""
        try:
            await submitter.submit(text)
        finally:
            refresh_messages()
            input_field.run_method("focus")

    def new_chat() -> None:
        if session.is_awaiting_response:
            ui.notify("Please wait for the current answer", type="warning")
            return
        bind_session(ChatSession(config.welcome_message))

    async def teardown() -> None:
        submitter.cancel_all()
        await client.aclose()

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-4xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("account_balance").classes("text-teal-600 text-3xl")
                ui.label(APP_TITLE).classes("text-lg font-bold text-slate-800")
            ui.button(icon="add", on_click=new_chat).props("flat round color=grey-8")

        # Messages
        with (
            ui.scroll_area().classes("flex-grow w-full bg-slate-50") as scroll_area,
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                input_field = (
                    ui.textarea(
                        placeholder="e.g., What are the thresholds for Making Tax Digital for VAT?"
                    )
                    .props("autogrow borderless dense rows=1 autofocus")
                    .classes("w-full")
                    .on("keydown.enter.exact.prevent", send_message)
                )
            send_btn = (
                ui.button(icon="send", on_click=send_message)
                .props("round unelevated")
                .classes("send-btn")
            )

    bind_session(session)
    ui.context.client.on_disconnect(teardown)


def main() -> None:
    """Start the chat UI."""
    config = get_client_config()
    logger.info(f"Using advisor API at {config.api_base_url}")
    ui.run(title=APP_TITLE, port=8080, reload=False, favicon="💷")
