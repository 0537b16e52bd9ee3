import inspect
import logging
from typing import Dict

from starlette.concurrency import run_in_threadpool
from starlette.endpoints import HTTPEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.types import Message, Receive, Scope, Send

from .database import DatabaseManager
from .errors import HandlerError

_logger = logging.getLogger(__name__)

API_NAME = "golang-pg-api/1.0"
API_CONTENT_TYPE = "application/json; charset=utf8"
HTTP_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")


def describe_request(request: Request) -> str:
    """访问日志前缀: 客户端地址 方法 URL"""
    client = request.client
    remote_addr = f"{client.host}:{client.port}" if client else "-"
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return f"{remote_addr} {request.method} {url}"


class BaseHTTPEndpoint(HTTPEndpoint):
    """基础HTTP端点类

    子类实现 get 等方法并返回 Response；抛出 HandlerError 时由这里统一
    转换为纯文本错误响应并记录日志。
    """

    def __init__(self, scope: Scope, receive: Receive, send: Send) -> None:
        super().__init__(scope, receive, send)
        self.response_started = False

        async def tracking_send(message: Message) -> None:
            if message["type"] == "http.response.start":
                self.response_started = True
            await send(message)

        self.send = tracking_send

    async def dispatch(self) -> None:
        """与 starlette HTTPEndpoint.dispatch 相同的处理方法查找，增加 HandlerError 转换

        路由只按路径匹配，没有对应方法时交给 get 处理
        """
        request = Request(self.scope, receive=self.receive)
        handler = None
        if request.method in HTTP_METHODS:
            handler = getattr(self, request.method.lower(), None)
        if handler is None:
            handler = getattr(self, "get", self.method_not_allowed)

        try:
            if inspect.iscoroutinefunction(handler):
                response = await handler(request)
            else:
                response = await run_in_threadpool(handler, request)
            if response is not None:
                await response(self.scope, self.receive, self.send)
        except HandlerError as err:
            _logger.error("%s %r", describe_request(request), err.cause)
            await self.send_error(err)
            return

        _logger.info(describe_request(request))

    async def send_error(self, err: HandlerError) -> None:
        if self.response_started:
            # 响应头已经发出，无法再改写状态码
            _logger.error("response already started, drop error response: %s", err.message)
            return
        response = self.error_response(err)
        await response(self.scope, self.receive, self.send)

    def error_response(self, err: HandlerError) -> Response:
        """创建纯文本错误响应"""
        return PlainTextResponse(err.message, status_code=err.code)


class BaseAPIEndpoint(BaseHTTPEndpoint):
    """JSON API 端点类

    所有响应都带 api 和 Content-Type 头，错误以 {"error", "code"} 返回；
    处理方法通过 self.db 使用共享的数据库句柄。
    """

    @property
    def api_headers(self) -> Dict[str, str]:
        return {"api": API_NAME, "Content-Type": API_CONTENT_TYPE}

    @property
    def db(self) -> DatabaseManager:
        return self.scope["app"].state.db

    async def write_string(self, code: int, payload: str) -> None:
        """写入状态码和字符串响应体，写入失败时抛出 500 HandlerError"""
        response = Response(payload, status_code=code, headers=self.api_headers)
        try:
            await response(self.scope, self.receive, self.send)
        except OSError as ex:
            raise HandlerError(ex, "internal server error") from ex

    def error_response(self, err: HandlerError) -> Response:
        """创建JSON错误响应，序列化失败时只返回状态码"""
        try:
            return JSONResponse(content=err.to_dict(), status_code=err.code, headers=self.api_headers)
        except (TypeError, ValueError):
            _logger.error("Encode JSON for error response was failed.")
            return Response(status_code=err.code, headers=self.api_headers)
