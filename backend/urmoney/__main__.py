"""Run the API server with uvicorn."""
import uvicorn

from .config import settings


def main() -> None:  # pragma: no cover - CLI entry point
    uvicorn.run(
        "urmoney.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
