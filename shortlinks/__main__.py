"""Run the service with uvicorn: ``python -m shortlinks``."""

import uvicorn

from shortlinks.core.setting import settings


def main() -> None:
    uvicorn.run(
        "shortlinks.main:app",
        host=settings.HOST,
        port=settings.PORT,
        server_header=False,
    )


if __name__ == "__main__":
    main()
