"""Run the ParkEase API with uvicorn."""

import uvicorn

from .core.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run("parkease.main:app", host=settings.api_host, port=settings.api_port, log_level="info")


if __name__ == "__main__":
    main()
