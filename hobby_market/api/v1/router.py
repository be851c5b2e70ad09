from fastapi import APIRouter

from hobby_market.api.v1.endpoints.health import router as health_router
from hobby_market.api.v1.endpoints.hobbies import router as hobbies_router
from hobby_market.api.v1.endpoints.me import router as me_router


router = APIRouter(prefix="/v1")
router.include_router(health_router, tags=["health"])
router.include_router(hobbies_router, tags=["hobbies"])
router.include_router(me_router, tags=["me"])
