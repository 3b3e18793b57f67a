"""API routes."""

from fastapi import APIRouter

from moving_inventory.api.routes import admin, inventories, item_library, items, rooms, upload

api_router = APIRouter()

# Customer routes (access token in the path)
api_router.include_router(inventories.router, prefix="/inventories", tags=["inventories"])
api_router.include_router(rooms.router, prefix="/inventories", tags=["rooms"])
api_router.include_router(items.router, prefix="/inventories", tags=["items"])
api_router.include_router(item_library.router, prefix="/item-library", tags=["item-library"])
api_router.include_router(upload.router, prefix="/upload", tags=["upload"])

# Admin routes (x-admin-key header)
api_router.include_router(admin.router, prefix="/admin/inventories", tags=["admin"])
