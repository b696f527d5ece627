from fastapi import APIRouter

from liquidcast.api.v1.controls import router as controls_router

router = APIRouter()
router.include_router(controls_router)
