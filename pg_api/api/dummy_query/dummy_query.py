import logging

from fastapi import APIRouter

from pg_api.core.base_endpoint import BaseAPIEndpoint
from pg_api.core.errors import HandlerError

_logger = logging.getLogger(__name__)

router = APIRouter()

DUMMY_QUERY = "select (1 + 4) * 20"


class DummyQueryEndpoint(BaseAPIEndpoint):
    async def get(self, request):
        try:
            await self.db.ping()
        except Exception as ex:
            raise HandlerError(ex, "db ping error") from ex

        try:
            value = await self.db.query_scalar(DUMMY_QUERY)
            result = int(value)
        except Exception as ex:
            raise HandlerError(ex, "sql query error") from ex

        _logger.info("sql success")
        await self.write_string(200, '{"result": "%d"}' % result)


router.add_route("/dummyQuery", DummyQueryEndpoint)
