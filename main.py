# main.py

from uvicorn import run

from blogcore import app
from blogcore.configs import settings


def main() -> None:
    # Editor sessions and their autosave timers live in process memory: one worker only
    run(
        "blogcore:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
        workers=1,
    )


if __name__ == "__main__":
    __all__ = ["app"]
    main()
