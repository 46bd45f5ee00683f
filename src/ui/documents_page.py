"""NiceGUI document library and document-grounded chat."""

import logging

from nicegui import events, ui

from src.documents.library import DocumentLibrary
from src.models.schemas import ChatMode
from src.session.errors import DocumentNotFoundError, DocumentValidationError, TransportError
from src.session.workspace import get_workspace
from src.ui.chat_page import render_header
from src.ui.chat_panel import CHAT_CSS, ChatPanel

logger = logging.getLogger(__name__)


class DocumentSidebar:
    """Lists the user's documents with upload and delete controls."""

    def __init__(self, library: DocumentLibrary) -> None:
        self.library = library
        self.container: ui.column
        self.count_label: ui.label

    def build(self) -> None:
        self.count_label = ui.label().classes("text-base font-semibold")
        ui.upload(
            label="Upload PDF",
            on_upload=self.handle_upload,
            auto_upload=True,
            max_files=1,
        ).props("accept=.pdf flat bordered").classes("w-full")
        with ui.scroll_area().classes("flex-grow w-full"):
            self.container = ui.column().classes("w-full gap-2")
        self.refresh()

    def refresh(self) -> None:
        documents = self.library.documents.list()
        self.count_label.set_text(f"Documents ({len(documents)})")
        self.container.clear()
        with self.container:
            if not documents:
                ui.label("No documents uploaded yet").classes("text-xs text-gray-400 py-4")
                return
            for document in documents:
                with ui.row().classes("w-full items-center justify-between flex-nowrap rounded-lg border px-2 py-1"):
                    with ui.column().classes("gap-0 min-w-0"):
                        with ui.row().classes("items-center gap-1 flex-nowrap"):
                            ui.icon("description").classes("text-indigo-500")
                            ui.label(document.name).classes("text-xs font-medium truncate")
                        ui.label(
                            f"Uploaded: {document.uploaded_at.astimezone():%Y-%m-%d}"
                            f" · ID: {document.file_id[:8]}..."
                        ).classes("text-[10px] text-gray-400")
                    ui.button(
                        icon="delete",
                        on_click=lambda _, did=document.id: self.handle_delete(did),
                    ).props("flat round dense size=sm")

    async def handle_upload(self, e: events.UploadEventArguments) -> None:
        content = await e.file.read()
        try:
            await self.library.upload(e.file.name, content)
        except DocumentValidationError as err:
            ui.notify(str(err), type="warning")
            return
        except TransportError as err:
            logger.warning(f"Upload of {e.file.name} failed: {err}")
            ui.notify("Failed to upload PDF", type="negative")
            return
        ui.notify("PDF uploaded successfully!", type="positive")
        self.refresh()

    async def handle_delete(self, document_id: str) -> None:
        try:
            await self.library.delete(document_id)
        except DocumentNotFoundError:
            self.refresh()
            return
        except TransportError as err:
            logger.warning(f"Delete of {document_id} failed: {err}")
            ui.notify("Failed to delete PDF", type="negative")
            return
        ui.notify("PDF deleted successfully!", type="positive")
        self.refresh()


@ui.page("/documents")
def documents_page() -> None:
    """Document library with chat grounded on every uploaded document."""
    ui.add_head_html(CHAT_CSS)
    workspace = get_workspace()
    sidebar = DocumentSidebar(workspace.library)
    panel = ChatPanel(
        workspace.document_chat,
        mode=ChatMode.DOCUMENTS,
        placeholder="Ask about your documents...",
        empty_hint="Chat with your documents",
    )

    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-6xl mx-auto app-container gap-0").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        render_header("Document Chat", "Free chat", "/")
        with ui.row().classes("w-full flex-grow flex-nowrap gap-0 overflow-hidden"):
            with ui.column().classes("w-60 h-full p-3 border-r bg-white gap-2"):
                panel.build_sidebar()
            with ui.column().classes("flex-grow h-full gap-0"):
                panel.build_timeline()
                panel.build_input()
            with ui.column().classes("w-64 h-full p-3 border-l bg-white gap-2"):
                sidebar.build()
