import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy.engine import URL


def getenv(name: str, default: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """读取环境变量，未设置或为空字符串时返回默认值"""
    environ = os.environ if environ is None else environ
    value = environ.get(name, "")
    if value == "":
        value = default
    return value


class DatabaseConfig(BaseModel):
    """数据库配置"""

    model_config = ConfigDict(frozen=True)

    database_type: str = "postgresql"
    host: str = "127.0.0.1"
    port: str = "5432"
    user: str = "dbuser"
    password: str = "dbuser"
    db: str = "dbuser"

    @property
    def url(self) -> URL:
        """构建数据库连接URL

        端口在这里才转换为整数，非数字端口会抛出 ValueError
        """
        if self.database_type != "postgresql":
            raise ValueError("Unsupported database type")
        return URL.create(
            "postgresql+asyncpg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=int(self.port),
            database=self.db,
        )


class Settings(BaseModel):
    """应用配置"""

    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig = DatabaseConfig()

    # 日志配置
    log_level: str = "INFO"
    log_dir: str = ""  # 为空时只输出到控制台
    log_json: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """从环境变量加载配置"""
        database = DatabaseConfig(
            host=getenv("DB_HOST", "127.0.0.1", environ),
            port=getenv("DB_PORT", "5432", environ),
            user=getenv("DB_USER", "dbuser", environ),
            password=getenv("DB_PASSWORD", "dbuser", environ),
            db=getenv("DB_NAME", "dbuser", environ),
        )

        log_json = getenv("LOG_JSON", "", environ).strip().lower()

        return cls(
            database=database,
            log_level=getenv("LOG_LEVEL", "INFO", environ).upper(),
            log_dir=getenv("LOG_DIR", "", environ),
            log_json=log_json in ("1", "true", "yes", "on"),
        )
