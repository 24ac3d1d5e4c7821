"""Process entrypoint that serves the API with uvicorn."""

from __future__ import annotations

import uvicorn

from resource_api.api.api_config import get_api_config


def run() -> None:
    config = get_api_config()
    uvicorn.run(
        "resource_api.api.app:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    run()
