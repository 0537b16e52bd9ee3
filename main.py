import logging
import sys

import uvicorn
import uvicorn.config
from sqlalchemy.exc import ArgumentError

from pg_api.core.config import Settings
from pg_api.core.logger import configure_logging
from pg_api.factory import create_app

PORT = 3000

logger = logging.getLogger("pg_api.main")


def uvicorn_log_level(level: str) -> str:
    level = level.lower()
    return level if level in uvicorn.config.LOG_LEVELS else "info"


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings)

    try:
        app = create_app(settings)
    except (ValueError, ArgumentError) as ex:
        logger.critical("invalid database configuration: %s", ex)
        sys.exit(1)

    logger.info("Listening on :%d", PORT)
    # 端口绑定失败时 uvicorn 会记录错误并以非零状态退出
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=PORT,
        workers=1,
        access_log=False,
        log_level=uvicorn_log_level(settings.log_level),
    )


if __name__ == "__main__":
    main()
