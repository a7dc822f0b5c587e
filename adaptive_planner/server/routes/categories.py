"""Task category endpoints."""

from __future__ import annotations

import asyncio
import logging

from fastapi import Depends, FastAPI

from ..dependencies import get_category_service, get_current_user_id, to_http_error
from ..schemas import (
    CategoryChangeResponse,
    CategoryCreateRequest,
    CategoryListResponse,
    CategoryRenameRequest,
)

logger = logging.getLogger(__name__)


def register_category_routes(app: FastAPI) -> None:
    """Register category endpoints."""

    @app.get("/api/categories", response_model=CategoryListResponse)
    async def list_categories(user_id: str = Depends(get_current_user_id)) -> CategoryListResponse:
        """Defaults, then custom categories, then "No Category"."""
        service = get_category_service()
        try:
            names = await asyncio.to_thread(service.list_categories, user_id)
            custom = await asyncio.to_thread(service.repository.custom_names, user_id)
            return CategoryListResponse(categories=names, custom=custom)
        except Exception as exc:
            raise to_http_error(exc, "Failed to list categories") from exc

    @app.post("/api/categories", response_model=CategoryChangeResponse, status_code=201)
    async def add_category(
        request: CategoryCreateRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> CategoryChangeResponse:
        service = get_category_service()
        try:
            name = await asyncio.to_thread(service.add, user_id, request.name)
            return CategoryChangeResponse(name=name)
        except Exception as exc:
            raise to_http_error(exc, "Failed to add category") from exc

    @app.put("/api/categories/{name}", response_model=CategoryChangeResponse)
    async def rename_category(
        name: str,
        request: CategoryRenameRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> CategoryChangeResponse:
        """Rename a custom category; its tasks follow."""
        service = get_category_service()
        try:
            moved = await asyncio.to_thread(service.rename, user_id, name, request.new_name)
            return CategoryChangeResponse(name=request.new_name.strip(), tasks_moved=moved)
        except Exception as exc:
            raise to_http_error(exc, "Failed to rename category") from exc

    @app.delete("/api/categories/{name}", response_model=CategoryChangeResponse)
    async def delete_category(
        name: str,
        user_id: str = Depends(get_current_user_id),
    ) -> CategoryChangeResponse:
        """Delete a custom category; its tasks move to "No Category"."""
        service = get_category_service()
        try:
            moved = await asyncio.to_thread(service.delete, user_id, name)
            return CategoryChangeResponse(name=name, tasks_moved=moved)
        except Exception as exc:
            raise to_http_error(exc, "Failed to delete category") from exc

    @app.delete("/api/categories", response_model=CategoryChangeResponse)
    async def clear_categories(user_id: str = Depends(get_current_user_id)) -> CategoryChangeResponse:
        service = get_category_service()
        try:
            moved = await asyncio.to_thread(service.clear_all, user_id)
            return CategoryChangeResponse(name="*", tasks_moved=moved)
        except Exception as exc:
            raise to_http_error(exc, "Failed to clear categories") from exc
