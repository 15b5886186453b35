"""
Run the API with uvicorn on the configured HOST and PORT.

Usage (from the ``event_backend`` directory):
    python -m src.api
"""

import uvicorn

from .settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
