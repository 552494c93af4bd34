"""API routers of the storefront."""

from fastapi import APIRouter

from menuku.api.routes.admin import router as admin_router
from menuku.api.routes.cart import router as cart_router
from menuku.api.routes.menus import router as menus_router
from menuku.api.routes.public import router as public_router
from menuku.api.routes.translate import router as translate_router

router = APIRouter()
router.include_router(menus_router)
router.include_router(admin_router)
router.include_router(cart_router)
router.include_router(public_router, prefix="/api", tags=["Public"])
router.include_router(translate_router, prefix="/api", tags=["Translate"])

__all__ = ["router"]
