from .config import Settings, DatabaseConfig
from .database import DatabaseManager
from .errors import HandlerError
from .logger import configure_logging

__all__ = [
    "Settings",
    "DatabaseConfig",
    "DatabaseManager",
    "HandlerError",
    "configure_logging",
]
