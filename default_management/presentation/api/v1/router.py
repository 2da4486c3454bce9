from fastapi import APIRouter

from .applications import applications_router
from .health import health_router
from .statistics import statistics_router
from .users import users_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(users_router, tags=["Users"])
router.include_router(applications_router, tags=["Applications"])
router.include_router(statistics_router, tags=["Statistics"])
