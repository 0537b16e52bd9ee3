from typing import Any, Dict, Optional

from starlette import status


class HandlerError(Exception):
    """请求处理失败

    cause 只写入服务端日志，message 和 code 返回给客户端
    """

    def __init__(
        self,
        cause: Optional[BaseException],
        message: str,
        code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    ):
        super().__init__(message)
        self.cause = cause
        self.message = message
        self.code = code

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}

    def __repr__(self) -> str:
        return f"HandlerError(code={self.code}, message={self.message!r}, cause={self.cause!r})"
