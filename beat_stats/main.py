"""CLI entrypoint for launching the FastAPI service with Uvicorn."""
from __future__ import annotations

import logging

import uvicorn

from .api import create_app
from .config import BeatConfig, get_settings, load_config
from .plugin import Beat


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(message)s")

    config = load_config(settings.config_path) if settings.config_path else BeatConfig()
    app = create_app(Beat(config))

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
