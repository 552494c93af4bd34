"""Admin endpoints managing menu items."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Response
from postgrest import APIError as PostgrestAPIError

from menuku.api.deps import require_admin
from menuku.schemas import MenuItem, MenuItemCreatePayload, MenuItemUpdatePayload, ReorderPayload
from menuku.services import menu_service
from menuku.services.menu_service import SupabaseUnavailableError
from menuku.services.postgrest_client import raise_postgrest_error

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)
T = TypeVar("T")


class SupabaseMenuRepository:
    """Async facade over the blocking Supabase menu service."""

    async def _run(self, operation: Callable[..., T], *args: Any, context: str) -> T:
        try:
            return await asyncio.to_thread(operation, *args)
        except PostgrestAPIError as exc:
            raise_postgrest_error(exc, context=context)
        except SupabaseUnavailableError as exc:
            logger.error("Supabase unavailable during %s: %s", context, exc)
            raise HTTPException(status_code=503, detail="Tidak dapat terhubung ke Supabase.") from exc

    async def list_menus(self) -> List[MenuItem]:
        return await self._run(menu_service.get_all_menus, context="list menus")

    async def get_menu(self, menu_id: str) -> MenuItem:
        item = await self._run(menu_service.get_menu_by_id, menu_id, context="get menu")
        if item is None:
            raise HTTPException(status_code=404, detail="Menu tidak ditemukan.")
        return item

    async def create_menu(self, payload: MenuItemCreatePayload) -> MenuItem:
        return await self._run(menu_service.create_menu, payload, context="create menu")

    async def update_menu(self, menu_id: str, payload: MenuItemUpdatePayload) -> MenuItem:
        item = await self._run(menu_service.update_menu, menu_id, payload, context="update menu")
        if item is None:
            raise HTTPException(status_code=404, detail="Menu tidak ditemukan.")
        return item

    async def delete_menu(self, menu_id: str) -> None:
        await self._run(menu_service.delete_menu, menu_id, context="delete menu")

    async def reorder_menus(self, item_ids: List[str]) -> List[MenuItem]:
        items = await self.list_menus()
        return menu_service.reorder_menu_items(items, item_ids)


async def get_menu_repository() -> SupabaseMenuRepository:
    return SupabaseMenuRepository()


@router.get("/menus", response_model=List[MenuItem])
async def list_menus(repository: SupabaseMenuRepository = Depends(get_menu_repository)) -> List[MenuItem]:
    return await repository.list_menus()


@router.post("/menus", response_model=MenuItem, status_code=201)
async def create_menu(
    payload: MenuItemCreatePayload,
    repository: SupabaseMenuRepository = Depends(get_menu_repository),
) -> MenuItem:
    return await repository.create_menu(payload)


@router.post("/menus/reorder", response_model=List[MenuItem])
async def reorder_menus(
    payload: ReorderPayload,
    repository: SupabaseMenuRepository = Depends(get_menu_repository),
) -> List[MenuItem]:
    return await repository.reorder_menus(payload.item_ids)


@router.get("/menus/{menu_id}", response_model=MenuItem)
async def get_menu(
    menu_id: str,
    repository: SupabaseMenuRepository = Depends(get_menu_repository),
) -> MenuItem:
    return await repository.get_menu(menu_id)


@router.patch("/menus/{menu_id}", response_model=MenuItem)
async def update_menu(
    menu_id: str,
    payload: MenuItemUpdatePayload,
    repository: SupabaseMenuRepository = Depends(get_menu_repository),
) -> MenuItem:
    return await repository.update_menu(menu_id, payload)


@router.delete("/menus/{menu_id}", status_code=204)
async def delete_menu(
    menu_id: str,
    repository: SupabaseMenuRepository = Depends(get_menu_repository),
) -> Response:
    await repository.delete_menu(menu_id)
    return Response(status_code=204)
