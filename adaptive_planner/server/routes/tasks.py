"""Task endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query

from adaptive_planner.core.database import UNSET
from adaptive_planner.mood import get_current_mood
from adaptive_planner.tasks import TaskCompletionFilter, filter_tasks, prioritize_tasks
from adaptive_planner.tasks.models import Subtask

from ..dependencies import (
    get_breakdown_service,
    get_current_user_id,
    get_journal_repository,
    get_mood_repository,
    get_task_repository,
    serialize_task,
    to_http_error,
)
from ..schemas import (
    BreakdownResponse,
    DeletedResponse,
    SubtaskCreateRequest,
    SubtaskRenameRequest,
    TaskCreateRequest,
    TaskResponse,
    TaskUpdateRequest,
)

logger = logging.getLogger(__name__)


def _owned_task(task_id: int, user_id: str):
    task = get_task_repository().get(task_id, user_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


def register_task_routes(app: FastAPI) -> None:
    """Register task CRUD, subtask and AI helper endpoints."""

    @app.get("/api/tasks", response_model=List[TaskResponse])
    async def list_tasks(
        category: Optional[str] = None,
        completion: TaskCompletionFilter = TaskCompletionFilter.ALL,
        user_id: str = Depends(get_current_user_id),
    ) -> List[TaskResponse]:
        """List tasks, incomplete first then by deadline."""
        repo = get_task_repository()
        try:
            tasks = await asyncio.to_thread(repo.list, user_id)
            return [serialize_task(t) for t in filter_tasks(tasks, category, completion)]
        except Exception as exc:
            raise to_http_error(exc, "Failed to list tasks") from exc

    @app.post("/api/tasks", response_model=TaskResponse, status_code=201)
    async def create_task(
        request: TaskCreateRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> TaskResponse:
        repo = get_task_repository()
        try:
            subtasks = [
                Subtask.new(title.strip(), i)
                for i, title in enumerate(t for t in request.subtasks if t.strip())
            ]
            task = await asyncio.to_thread(
                repo.create,
                user_id,
                request.title.strip(),
                request.deadline,
                request.priority,
                request.category,
                request.required_energy,
                request.description,
                subtasks,
            )
            return serialize_task(task)
        except Exception as exc:
            raise to_http_error(exc, "Failed to create task") from exc

    @app.get("/api/tasks/prioritized", response_model=List[TaskResponse])
    async def prioritized_tasks(
        mood: Optional[str] = None,
        energy: Optional[str] = Query(default=None, pattern="^(low|medium|high)$"),
        user_id: str = Depends(get_current_user_id),
    ) -> List[TaskResponse]:
        """Tasks ordered for the current mood and energy.

        Without explicit values the latest check-in and journal mood are used.
        """
        try:
            tasks = await asyncio.to_thread(get_task_repository().list, user_id)
            if mood is None or energy is None:
                mood_repo = get_mood_repository()
                check_ins = await asyncio.to_thread(mood_repo.recent, user_id, 5)
                entries = await asyncio.to_thread(get_journal_repository().recent, user_id, 10)
                if mood is None:
                    mood = get_current_mood(entries, check_ins)
                if energy is None and check_ins:
                    energy = check_ins[0].energy_level
            ordered = prioritize_tasks(tasks, mood, energy)
            return [serialize_task(t) for t in ordered]
        except Exception as exc:
            raise to_http_error(exc, "Failed to prioritize tasks") from exc

    @app.get("/api/tasks/{task_id}", response_model=TaskResponse)
    async def get_task(task_id: int, user_id: str = Depends(get_current_user_id)) -> TaskResponse:
        try:
            task = await asyncio.to_thread(_owned_task, task_id, user_id)
            return serialize_task(task)
        except Exception as exc:
            raise to_http_error(exc, "Failed to load task") from exc

    @app.patch("/api/tasks/{task_id}", response_model=TaskResponse)
    async def update_task(
        task_id: int,
        request: TaskUpdateRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> TaskResponse:
        repo = get_task_repository()
        try:
            await asyncio.to_thread(_owned_task, task_id, user_id)
            payload = request.model_dump(exclude_unset=True)
            task = await asyncio.to_thread(
                repo.update,
                task_id,
                title=payload.get("title"),
                description=payload["description"] if "description" in payload else UNSET,
                deadline=payload.get("deadline"),
                priority=payload.get("priority"),
                category=payload.get("category"),
                required_energy=payload.get("required_energy"),
                is_completed=payload.get("is_completed"),
            )
            if task is None:
                raise HTTPException(status_code=404, detail="Task not found")
            return serialize_task(task)
        except Exception as exc:
            raise to_http_error(exc, "Failed to update task") from exc

    @app.delete("/api/tasks/{task_id}", response_model=DeletedResponse)
    async def delete_task(task_id: int, user_id: str = Depends(get_current_user_id)) -> DeletedResponse:
        repo = get_task_repository()
        try:
            await asyncio.to_thread(_owned_task, task_id, user_id)
            deleted = await asyncio.to_thread(repo.delete, task_id)
            if not deleted:
                raise HTTPException(status_code=404, detail="Task not found")
            return DeletedResponse(deleted=True, id=task_id)
        except Exception as exc:
            raise to_http_error(exc, "Failed to delete task") from exc

    @app.post("/api/tasks/{task_id}/subtasks", response_model=TaskResponse)
    async def add_subtasks(
        task_id: int,
        request: SubtaskCreateRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> TaskResponse:
        repo = get_task_repository()
        try:
            await asyncio.to_thread(_owned_task, task_id, user_id)
            task = await asyncio.to_thread(repo.add_subtasks, task_id, request.titles)
            return serialize_task(task)
        except Exception as exc:
            raise to_http_error(exc, "Failed to add subtasks") from exc

    @app.post("/api/tasks/{task_id}/subtasks/{subtask_id}/toggle", response_model=TaskResponse)
    async def toggle_subtask(
        task_id: int,
        subtask_id: str,
        user_id: str = Depends(get_current_user_id),
    ) -> TaskResponse:
        repo = get_task_repository()
        try:
            before = await asyncio.to_thread(_owned_task, task_id, user_id)
            if not any(s.id == subtask_id for s in before.subtasks):
                raise HTTPException(status_code=404, detail="Subtask not found")
            task = await asyncio.to_thread(repo.toggle_subtask, task_id, subtask_id)
            return serialize_task(task)
        except Exception as exc:
            raise to_http_error(exc, "Failed to toggle subtask") from exc

    @app.patch("/api/tasks/{task_id}/subtasks/{subtask_id}", response_model=TaskResponse)
    async def rename_subtask(
        task_id: int,
        subtask_id: str,
        request: SubtaskRenameRequest,
        user_id: str = Depends(get_current_user_id),
    ) -> TaskResponse:
        repo = get_task_repository()
        try:
            before = await asyncio.to_thread(_owned_task, task_id, user_id)
            if not any(s.id == subtask_id for s in before.subtasks):
                raise HTTPException(status_code=404, detail="Subtask not found")
            task = await asyncio.to_thread(
                repo.rename_subtask, task_id, subtask_id, request.title.strip()
            )
            return serialize_task(task)
        except Exception as exc:
            raise to_http_error(exc, "Failed to rename subtask") from exc

    @app.delete("/api/tasks/{task_id}/subtasks/{subtask_id}", response_model=TaskResponse)
    async def delete_subtask(
        task_id: int,
        subtask_id: str,
        user_id: str = Depends(get_current_user_id),
    ) -> TaskResponse:
        repo = get_task_repository()
        try:
            before = await asyncio.to_thread(_owned_task, task_id, user_id)
            if not any(s.id == subtask_id for s in before.subtasks):
                raise HTTPException(status_code=404, detail="Subtask not found")
            task = await asyncio.to_thread(repo.delete_subtask, task_id, subtask_id)
            return serialize_task(task)
        except Exception as exc:
            raise to_http_error(exc, "Failed to delete subtask") from exc

    @app.post("/api/tasks/{task_id}/breakdown", response_model=BreakdownResponse)
    async def breakdown_task(
        task_id: int,
        apply: bool = False,
        user_id: str = Depends(get_current_user_id),
    ) -> BreakdownResponse:
        """Suggest subtasks with the AI; ``apply=true`` also appends them."""
        service = get_breakdown_service()
        try:
            task = await asyncio.to_thread(_owned_task, task_id, user_id)
            subtasks = await asyncio.to_thread(
                service.breakdown_task,
                task.title,
                task.description,
                task.priority,
                task.deadline,
            )
            if apply:
                await asyncio.to_thread(get_task_repository().add_subtasks, task_id, subtasks)
            return BreakdownResponse(task_id=task_id, subtasks=subtasks, applied=apply)
        except Exception as exc:
            raise to_http_error(exc, "Failed to break down task") from exc
