"""Serve the application with uvicorn on the configured host and port."""

import uvicorn

from usefulwork.config import load_settings


def main():
    settings = load_settings()
    # PORT stays a raw string in Settings so a bad value never blocks importing the app.
    port = int(settings.port)
    uvicorn.run("usefulwork.main:app", host=settings.host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
