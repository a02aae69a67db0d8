"""Serve the API: python -m nuleaf"""

import uvicorn

from nuleaf.api.app import create_app
from nuleaf.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
