import logging
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from .config import DatabaseConfig

_logger = logging.getLogger(__name__)


class DatabaseManager:
    """进程内唯一的数据库句柄

    引擎在启动时创建一次，所有请求共享；连接池由驱动默认配置提供。
    处理函数不允许关闭它，只在应用关闭时释放一次。
    """

    def __init__(self):
        self._config: Optional[DatabaseConfig] = None
        self._engine: Optional[AsyncEngine] = None
        self._closed = False

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("database is not registered")
        return self._engine

    def register(self, cfg: DatabaseConfig) -> None:
        """创建引擎，不会真正建立连接

        配置格式错误时抛出 ValueError 或 sqlalchemy.exc.ArgumentError
        """
        if self._engine is not None:
            return
        eng = create_async_engine(
            cfg.url,
            connect_args={"ssl": False},  # sslmode=disable
            echo=False,
        )
        self._config = cfg
        self._engine = eng
        _logger.info("database engine created for %s:%s/%s", cfg.host, cfg.port, cfg.db)

    async def ping(self) -> None:
        """存活探测：从连接池取一个连接执行 SELECT 1"""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def query_scalar(self, statement: str) -> Any:
        """执行查询并返回唯一一行的第一列，没有结果或多行时抛出异常"""
        async with self.engine.connect() as conn:
            result = await conn.execute(text(statement))
            return result.scalar_one()

    async def close(self) -> None:
        """释放引擎，重复调用无副作用"""
        if self._closed or self._engine is None:
            return
        self._closed = True
        await self._engine.dispose()
        _logger.info("database engine disposed")
