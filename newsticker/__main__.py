"""Run the API server with uvicorn."""

import uvicorn

from .config import config


def main():
    uvicorn.run(
        "newsticker.server:app",
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
