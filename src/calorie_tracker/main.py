"""Command-line runner serving the app with uvicorn."""

import uvicorn

from calorie_tracker.config import Settings


def main() -> None:
    """Serve the ASGI app on the configured host and port."""
    settings = Settings()
    uvicorn.run(
        "calorie_tracker.api.asgi:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
