"""Run the API server: `python -m larder` or the `larder` console script."""

import uvicorn

from larder.config import settings


def main() -> None:
    uvicorn.run(
        "larder.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
