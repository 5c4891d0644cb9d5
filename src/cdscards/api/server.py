"""
ASGI Entry Point for the cdscards API.

Loads `.env` before the application factory runs so that settings read at
import time see the configured mode, token and SMART launch context.

Usage
-----
    $ python -m cdscards.api.server
    $ uvicorn cdscards.api.server:app --reload
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from cdscards.api.app import create_app
from cdscards.core.settings import load_settings

load_dotenv(dotenv_path=Path(".env"))

app = create_app()


def main() -> None:
    """Run the API server locally for development."""
    cfg = load_settings()
    print(f"{'[ cdscards ]':=^60}")
    print(f"{'mode':<20} : {cfg.mode}")
    print(f"{'bearer token':<20} : {'✅ set' if cfg.bearer_token else '❌ missing'}")
    print(f"{'SMART context':<20} : {'✅ set' if cfg.has_launch_context else '❌ missing'}")
    print(f"{'='*60}\n")

    uvicorn.run(
        "cdscards.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=cfg.is_dev,
        log_level="info",
    )


if __name__ == "__main__":
    main()
