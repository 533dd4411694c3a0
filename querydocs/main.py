"""Main application entry point.

Runs the development backend (FastAPI) with the NiceGUI chat interface
mounted on the same server, or the interface alone against an external
chat service. Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def run_integrated() -> None:
    """Run the development backend with NiceGUI mounted on it.

    The UI talks to the backend over HTTP on the same port unless
    API_BASE_URL points elsewhere.
    """
    import uvicorn
    from nicegui import ui

    from querydocs.api.app import create_app
    from querydocs.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    port = int(os.getenv("PORT", "8000"))
    os.environ.setdefault("API_BASE_URL", f"http://localhost:{port}/api")

    app = create_app()

    ui.run_with(
        app,
        title="QueryDocs AI",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "querydocs-secret"),
    )

    logger.info(f"Starting integrated server on http://localhost:{port}")
    logger.info(f"API docs available at http://localhost:{port}/docs")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_ui() -> None:
    """Run only the chat interface against the service at API_BASE_URL."""
    from querydocs.ui.chat_page import main as run_page

    logger.info(f"Chat UI using API at {os.getenv('API_BASE_URL', 'http://localhost:7000/api')}")
    run_page()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=ui to serve only the interface. Default is integrated mode.
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting QueryDocs in {mode} mode")

    if mode == "ui":
        run_ui()
    else:
        run_integrated()


if __name__ in {"__main__", "__mp_main__"}:
    main()
