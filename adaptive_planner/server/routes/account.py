"""Profile, avatar and account deletion endpoints."""

from __future__ import annotations

import asyncio
import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import FileResponse

from ..dependencies import (
    get_account_deletion_service,
    get_avatar_store,
    get_current_user_id,
    get_profile_repository,
    to_http_error,
)
from ..schemas import (
    AccountDeleteRequest,
    AccountDeleteResponse,
    DeletedResponse,
    ProfileResponse,
    ProfileUpdateRequest,
)

logger = logging.getLogger(__name__)

CONTENT_TYPE_SUFFIXES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def _profile(user_id: str) -> ProfileResponse:
    profile = get_profile_repository().get(user_id)
    return ProfileResponse(
        user_id=user_id,
        display_name=profile.display_name if profile else "",
        email=profile.email if profile else "",
        has_avatar=get_avatar_store().find(user_id) is not None,
    )


def register_account_routes(app: FastAPI) -> None:
    """Register account endpoints."""

    @app.get("/api/account/profile", response_model=ProfileResponse)
    async def get_profile(user_id: str = Depends(get_current_user_id)) -> ProfileResponse:
        try:
            return await asyncio.to_thread(_profile, user_id)
        except Exception as exc:
            raise to_http_error(exc, "Failed to load profile") from exc

    @app.put("/api/account/profile", response_model=ProfileResponse)
    async def update_profile(
        request: ProfileUpdateRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> ProfileResponse:
        repo = get_profile_repository()
        try:
            await asyncio.to_thread(repo.upsert, user_id, request.display_name, request.email)
            return await asyncio.to_thread(_profile, user_id)
        except Exception as exc:
            raise to_http_error(exc, "Failed to update profile") from exc

    @app.put("/api/account/avatar", response_model=ProfileResponse)
    async def upload_avatar(request: Request, user_id: str = Depends(get_current_user_id)) -> ProfileResponse:
        """Store the raw image body; the content type picks the file suffix."""
        content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
        suffix = CONTENT_TYPE_SUFFIXES.get(content_type)
        if suffix is None:
            raise HTTPException(status_code=415, detail=f"Unsupported avatar type: {content_type or 'none'}")
        store = get_avatar_store()
        try:
            data = await request.body()
            path = await asyncio.to_thread(store.save, user_id, data, suffix)
            await asyncio.to_thread(get_profile_repository().upsert, user_id, None, None, str(path))
            return await asyncio.to_thread(_profile, user_id)
        except Exception as exc:
            raise to_http_error(exc, "Failed to save avatar") from exc

    @app.get("/api/account/avatar")
    async def get_avatar(user_id: str = Depends(get_current_user_id)) -> FileResponse:
        path = get_avatar_store().find(user_id)
        if path is None:
            raise HTTPException(status_code=404, detail="Avatar not found")
        return FileResponse(path)

    @app.delete("/api/account/avatar", response_model=DeletedResponse)
    async def delete_avatar(user_id: str = Depends(get_current_user_id)) -> DeletedResponse:
        store = get_avatar_store()
        try:
            deleted = await asyncio.to_thread(store.delete, user_id)
            if await asyncio.to_thread(get_profile_repository().get, user_id):
                await asyncio.to_thread(get_profile_repository().upsert, user_id, None, None, None)
            return DeletedResponse(deleted=deleted)
        except Exception as exc:
            raise to_http_error(exc, "Failed to delete avatar") from exc

    @app.delete("/api/account", response_model=AccountDeleteResponse)
    async def delete_account(
        request: AccountDeleteRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> AccountDeleteResponse:
        """Delete every record of the user. Requires ``confirmation == "DELETE"``."""
        service = get_account_deletion_service()
        try:
            counts = await asyncio.to_thread(service.delete_account, user_id, request.confirmation)
            return AccountDeleteResponse(deleted=True, counts=counts)
        except Exception as exc:
            raise to_http_error(exc, "Failed to delete account") from exc
