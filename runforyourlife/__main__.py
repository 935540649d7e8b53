import logging

import uvicorn

from . import config
from .app import create_app


def main() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(f"RunForYourLife server listening on http://localhost:{config.PORT}")
    uvicorn.run(create_app(), host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
