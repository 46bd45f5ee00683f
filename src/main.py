"""Main application entry point.

Run modes (``RUN_MODE``):
    - integrated: webhook proxy and chat pages share one server (default)
    - separate: proxy on port 8000 and chat pages on port 8080, two processes
    - proxy: webhook proxy only
    - ui: chat pages only, talking to a proxy elsewhere

Environment variables are loaded from .env file.
"""

import logging
import os
import subprocess
import sys
import time

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

PAGE_TITLE = "AI Developer Assistant"


def _host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def _port(default: int) -> int:
    return int(os.getenv("PORT", str(default)))


def register_pages() -> None:
    """Import the UI modules so their ``@ui.page`` routes exist."""
    from nicegui import app as nicegui_app

    from src.session.workspace import close_workspace
    from src.ui import chat_page, documents_page  # noqa: F401 - Registers the pages

    nicegui_app.on_shutdown(close_workspace)


def run_integrated() -> None:
    """Serve the proxy routes and the chat pages from one FastAPI app.

    The default CHAT_API_BASE_URL points the chat client back at this process,
    so the pages reach the webhooks through the proxy routes.
    """
    import uvicorn
    from nicegui import ui

    from src.api.app import create_app

    app = create_app()
    register_pages()
    ui.run_with(
        app,
        title=PAGE_TITLE,
        favicon="🧠",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "chat-session-secret"),
    )

    port = _port(8000)
    logger.info(f"Chat UI on http://localhost:{port}/, proxy docs on http://localhost:{port}/docs")
    uvicorn.run(app, host=_host(), port=port, log_level=os.getenv("LOG_LEVEL", "info").lower())


def run_proxy() -> None:
    import uvicorn

    port = _port(8000)
    logger.info(f"Starting webhook proxy on http://localhost:{port}")
    uvicorn.run("src.api.app:app", host=_host(), port=port)


def run_ui() -> None:
    from nicegui import ui

    register_pages()
    ui.run(title=PAGE_TITLE, host=_host(), port=_port(8080), reload=False)


def run_separate() -> None:
    """Run the proxy and the UI as two child processes.

    Stops both as soon as either exits.
    """
    children = [
        subprocess.Popen(
            [sys.executable, "-m", "src.main"],
            env={**os.environ, "RUN_MODE": mode, "PORT": port},
        )
        for mode, port in (("proxy", "8000"), ("ui", "8080"))
    ]
    try:
        while all(child.poll() is None for child in children):
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for child in children:
            child.terminate()
        for child in children:
            child.wait()


RUNNERS = {
    "integrated": run_integrated,
    "separate": run_separate,
    "proxy": run_proxy,
    "ui": run_ui,
}


def main() -> None:
    """Application entry point; dispatches on RUN_MODE."""
    mode = os.getenv("RUN_MODE", "integrated").lower()
    runner = RUNNERS.get(mode)
    if runner is None:
        logger.error(f"Unknown RUN_MODE '{mode}', expected one of {', '.join(RUNNERS)}")
        sys.exit(2)

    logger.info(f"Starting chat front-end in {mode} mode")
    runner()


if __name__ in {"__main__", "__mp_main__"}:
    main()
