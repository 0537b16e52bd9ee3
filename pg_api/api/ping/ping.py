import logging

from fastapi import APIRouter

from pg_api.core.base_endpoint import BaseAPIEndpoint
from pg_api.core.errors import HandlerError

_logger = logging.getLogger(__name__)

router = APIRouter()


class PingEndpoint(BaseAPIEndpoint):
    async def get(self, request):
        try:
            await self.db.ping()
        except Exception as ex:
            raise HandlerError(ex, "internal server error") from ex

        _logger.info("success ping database")
        await self.write_string(200, '{"status": "success"}')


router.add_route("/ping", PingEndpoint)
