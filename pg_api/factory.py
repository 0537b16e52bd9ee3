import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from pg_api.core.config import Settings
from pg_api.core.database import DatabaseManager

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    _logger.info("应用启动中...")

    yield

    # 关闭时执行，信号退出和端口绑定失败都会走到这里
    _logger.info("应用关闭中...")
    await app.state.db.close()
    _logger.info("数据库连接已关闭")


def create_app(settings: Optional[Settings] = None, database=None) -> FastAPI:
    """应用工厂函数

    database 为空时按配置创建数据库句柄；配置格式错误时抛出异常
    """
    settings = settings or Settings.from_env()

    if database is None:
        database = DatabaseManager()
        database.register(settings.database)

    app = FastAPI(
        title="pg-api",
        description="HTTP service with a PostgreSQL liveness check and a sample query",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.db = database

    setup_routes(app)
    return app


def setup_routes(app: FastAPI):
    """设置路由"""
    from pg_api.api import router as api_router

    app.include_router(api_router)
