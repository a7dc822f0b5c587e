"""FastAPI application bootstrap."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import (
    register_account_routes,
    register_analytics_routes,
    register_category_routes,
    register_focus_routes,
    register_journal_routes,
    register_mood_routes,
    register_notification_routes,
    register_task_routes,
)
from .schemas import HealthResponse


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Adaptive Planner API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    register_task_routes(app)
    register_journal_routes(app)
    register_mood_routes(app)
    register_focus_routes(app)
    register_category_routes(app)
    register_notification_routes(app)
    register_analytics_routes(app)
    register_account_routes(app)

    return app


app = create_app()
