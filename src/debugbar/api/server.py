"""
ASGI entry point for the debugbar demo application.

Loads `.env` before the application factory runs so that settings read at
import time see the developer's overrides.

Usage
-----
Run via the module entry point:
    $ python -m debugbar.api.server

Or via uvicorn directly:
    $ uvicorn debugbar.api.server:app --reload
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from debugbar.api.app import create_app

load_dotenv(dotenv_path=Path(".env"))

app = create_app()


def main() -> None:
    """Run the demo server locally for development."""
    uvicorn.run(
        "debugbar.api.server:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info",
    )


if __name__ == "__main__":
    main()
