"""Application entry point.

Runs the NiceGUI chat interface on port 8080 against the advisor API
configured in the environment (see advisor_chat.config).
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


def main() -> None:
    """Application entry point."""
    from advisor_chat.ui.chat_page import main as run_chat_ui

    logger.info("Starting advisor chat on http://localhost:8080")
    run_chat_ui()


if __name__ in {"__main__", "__mp_main__"}:
    main()
