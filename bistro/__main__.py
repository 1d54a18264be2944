"""Run the API with uvicorn: ``python -m bistro``."""

import uvicorn

from bistro.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "bistro.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    main()
