from fastapi import APIRouter
from starlette.responses import PlainTextResponse

from pg_api.core.base_endpoint import BaseHTTPEndpoint

router = APIRouter()


class HelloWorldEndpoint(BaseHTTPEndpoint):
    async def get(self, request):
        return PlainTextResponse("Hello world!")


router.add_route("/helloworld", HelloWorldEndpoint)
