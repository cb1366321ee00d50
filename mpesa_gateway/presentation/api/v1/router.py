from fastapi import APIRouter

from .callbacks import callbacks_router
from .payments import payments_router

router = APIRouter()

router.include_router(payments_router, tags=["Payments"])
router.include_router(callbacks_router, tags=["Callbacks"])
