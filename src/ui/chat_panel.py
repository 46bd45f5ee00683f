"""Reusable NiceGUI chat panel: session sidebar, timeline and input box.

The panel only renders engine state. Every mutation goes through the
session repository or the request orchestrator.
"""

import logging
from collections.abc import Callable

from nicegui import ui

from src.models.schemas import ChatMode, Message, Role
from src.session.export import EXPORTERS
from src.session.orchestrator import RequestOrchestrator
from src.ui.rendering import markdown_to_html, plain_to_html

logger = logging.getLogger(__name__)

CHAT_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }
    body { background: #f5f5f5; min-height: 100vh; }
    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }
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
    .session-active { background: rgba(102, 126, 234, 0.12); }
    .typing-dot {
        width: 8px; height: 8px;
        background: #667eea;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }
    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }
    .reveal-cursor::after { content: "▍"; color: #667eea; }
</style>
"""


def _format_time(message: Message) -> str:
    return message.created_at.astimezone().strftime("%I:%M %p")


def feedback_notice(message: Message, liked: bool) -> str:
    """Log a like or dislike on an answer and return its acknowledgement."""
    logger.info(f"Feedback on message {message.id}: {'like' if liked else 'dislike'}")
    return "Liked!" if liked else "Disliked!"


class ChatPanel:
    """Chat UI bound to one orchestrator.

    Args:
        orchestrator: Runs turns and owns the session repository.
        mode: Which answering endpoint turns go to.
        placeholder: Input placeholder text.
        empty_hint: Shown when the current session has no messages.
        on_turn_finished: Called after each turn, e.g. to refresh other widgets.
    """

    def __init__(
        self,
        orchestrator: RequestOrchestrator,
        mode: ChatMode = ChatMode.CHAT,
        placeholder: str = "Type a message...",
        empty_hint: str = "Start a conversation",
        on_turn_finished: Callable[[], None] | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.repository = orchestrator.repository
        self.mode = mode
        self.placeholder = placeholder
        self.empty_hint = empty_hint
        self.on_turn_finished = on_turn_finished

        self.sessions_container: ui.column
        self.messages_container: ui.column
        self.input_field: ui.textarea
        self.send_btn: ui.button

    # === Sidebar ===

    def build_sidebar(self) -> None:
        ui.button("New Chat", icon="add", on_click=self.new_chat).props(
            "unelevated color=primary"
        ).classes("w-full")
        with ui.scroll_area().classes("flex-grow w-full"):
            self.sessions_container = ui.column().classes("w-full gap-1")
        self.refresh_sessions()

    def refresh_sessions(self) -> None:
        self.sessions_container.clear()
        current_id = self.repository.current_id
        with self.sessions_container:
            for summary in self.repository.list():
                active = "session-active" if summary.id == current_id else ""
                with ui.row().classes(
                    f"w-full items-center justify-between rounded-lg px-2 py-1 flex-nowrap {active}"
                ):
                    with ui.row().classes("items-center gap-2 min-w-0 flex-nowrap cursor-pointer").on(
                        "click", lambda _, sid=summary.id: self.load_session(sid)
                    ):
                        ui.icon("chat_bubble_outline").classes("text-indigo-500")
                        ui.label(summary.title).classes("text-sm truncate")
                    ui.button(
                        icon="delete",
                        on_click=lambda _, sid=summary.id: self.delete_session(sid),
                    ).props("flat round dense size=sm")

    def new_chat(self) -> None:
        self.repository.create()
        self.refresh_sessions()
        self.refresh_messages()
        ui.notify("New chat created", type="positive")

    def load_session(self, session_id: str) -> None:
        self.repository.load(session_id)
        self.refresh_sessions()
        self.refresh_messages()

    def delete_session(self, session_id: str) -> None:
        self.repository.delete(session_id)
        self.refresh_sessions()
        self.refresh_messages()
        ui.notify("Chat deleted", type="positive")

    # === Timeline ===

    def build_timeline(self) -> None:
        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5"),
        ):
            self.messages_container = ui.column().classes("w-full gap-4")
        self.refresh_messages()

    def render_avatar(self, is_user: bool) -> None:
        color = "bg-indigo-500" if is_user else "bg-gray-500"
        icon = "person" if is_user else "smart_toy"
        with ui.element("div").classes(
            f"w-9 h-9 rounded-full flex items-center justify-center {color}"
        ):
            ui.icon(icon).classes("text-white text-lg")

    def render_export_menu(self, message: Message) -> None:
        with ui.button(icon="download").props("flat round dense size=sm"):
            with ui.menu():
                for name, exporter in EXPORTERS.items():
                    ui.menu_item(
                        f"Export as {name.capitalize()}",
                        on_click=lambda _, fmt=exporter, label=name: self._copy(fmt(message), label),
                    )

    def render_feedback(self, message: Message) -> None:
        for icon, liked in (("thumb_up", True), ("thumb_down", False)):
            ui.button(
                icon=icon,
                on_click=lambda _, up=liked: ui.notify(feedback_notice(message, up), type="positive"),
            ).props("flat round dense size=sm")

    def _copy(self, text: str, label: str) -> None:
        ui.clipboard.write(text)
        ui.notify(f"Exported as {label}!", type="positive")

    def render_message(self, message: Message) -> None:
        is_user = message.role is Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                self.render_avatar(False)
            with ui.column().classes("max-w-[70%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    html = plain_to_html(message.content) if is_user else markdown_to_html(message.content)
                    ui.html(html, sanitize=False).classes("text-sm leading-relaxed")
                with ui.row().classes("items-center gap-1"):
                    ui.label(_format_time(message)).classes("text-[10px] text-gray-400")
                    if not is_user:
                        self.render_feedback(message)
                        self.render_export_menu(message)
            if is_user:
                self.render_avatar(True)

    def refresh_messages(self, hide_last: bool = False) -> None:
        self.messages_container.clear()
        timeline = self.repository.timeline()
        messages = list(timeline.messages) if timeline is not None else []
        if hide_last and messages:
            messages = messages[:-1]
        with self.messages_container:
            if not messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label(self.empty_hint).classes("text-lg text-gray-400")
                return
            for message in messages:
                self.render_message(message)

    def render_thinking(self) -> ui.row:
        with self.messages_container, ui.row().classes("w-full justify-start gap-3 items-end") as row:
            self.render_avatar(False)
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")
        return row

    # === Input ===

    def build_input(self) -> None:
        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            self.input_field = (
                ui.textarea(placeholder=self.placeholder)
                .props("autogrow outlined dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", self.send_message)
            )
            self.send_btn = ui.button(icon="send", on_click=self.send_message).props(
                "round unelevated color=primary"
            )

    async def send_message(self) -> None:
        text = self.input_field.value or ""
        current = self.repository.current()
        if current is not None and self.orchestrator.is_busy(current.id):
            return

        thinking: ui.row | None = None
        reveal_label: ui.html | None = None

        def on_user_message(_: Message) -> None:
            nonlocal thinking
            self.input_field.value = ""
            self.send_btn.disable()
            self.refresh_sessions()
            self.refresh_messages()
            thinking = self.render_thinking()

        def on_reveal(_: str, partial: str) -> None:
            nonlocal reveal_label, thinking
            if reveal_label is None:
                # the answer is already committed; show the timeline without it
                self.refresh_messages(hide_last=True)
                thinking = None
                with self.messages_container, ui.row().classes("w-full justify-start gap-3 items-end"):
                    self.render_avatar(False)
                    with ui.element("div").classes("message-assistant px-4 py-3 max-w-[70%]"):
                        reveal_label = ui.html("", sanitize=False).classes("text-sm leading-relaxed reveal-cursor")
            reveal_label.set_content(plain_to_html(partial))

        try:
            await self.orchestrator.submit(
                text,
                mode=self.mode,
                on_user_message=on_user_message,
                on_reveal=on_reveal,
                notify=lambda message, level: ui.notify(message, type=level),
            )
        finally:
            if thinking is not None:
                thinking.delete()
            self.send_btn.enable()
            self.refresh_sessions()
            self.refresh_messages()
            if self.on_turn_finished is not None:
                self.on_turn_finished()
