from fastapi import APIRouter
from .hello.hello import router as hello_router
from .ping.ping import router as ping_router
from .dummy_query.dummy_query import router as dummy_query_router

router = APIRouter()

router.include_router(hello_router)
router.include_router(ping_router)
router.include_router(dummy_query_router)
