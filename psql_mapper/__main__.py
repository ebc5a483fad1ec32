"""Run the API with uvicorn: python -m psql_mapper"""

import uvicorn

from psql_mapper.config import get_settings


def main() -> None:
    settings = get_settings()
    # lifespan="on": a failed registry build must stop the server, not be skipped
    uvicorn.run(
        "psql_mapper.main:app",
        host=settings.host,
        port=settings.port,
        lifespan="on",
        log_config=None,
    )


if __name__ == "__main__":
    main()
