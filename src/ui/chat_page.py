"""NiceGUI free-chat page with a persisted session sidebar."""

from nicegui import ui

from src.models.schemas import ChatMode
from src.session.workspace import get_workspace
from src.ui.chat_panel import CHAT_CSS, ChatPanel


def render_header(title: str, link_label: str, link_target: str) -> None:
    with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
        with ui.row().classes("items-center gap-3"):
            ui.icon("psychology").classes("text-white text-3xl")
            ui.label(title).classes("text-lg font-semibold text-white")
        ui.link(link_label, link_target).classes("text-sm text-white/90 no-underline")


@ui.page("/")
def chat_page() -> None:
    """Free-form Q&A with the answering service."""
    ui.add_head_html(CHAT_CSS)
    workspace = get_workspace()
    panel = ChatPanel(
        workspace.chat,
        mode=ChatMode.CHAT,
        placeholder="Ask anything about coding...",
        empty_hint="Ask me anything about coding, logic, or development!",
    )

    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-5xl mx-auto app-container gap-0").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        render_header("AI Developer Assistant", "Documents", "/documents")
        with ui.row().classes("w-full flex-grow flex-nowrap gap-0 overflow-hidden"):
            with ui.column().classes("w-64 h-full p-3 border-r bg-white gap-2"):
                panel.build_sidebar()
            with ui.column().classes("flex-grow h-full gap-0"):
                panel.build_timeline()
                panel.build_input()

