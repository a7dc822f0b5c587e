"""CLI entry point for launching the FastAPI app with uvicorn."""

import uvicorn


def main() -> None:
    """Run the development server."""
    uvicorn.run(
        "adaptive_planner.server.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["adaptive_planner"],
    )


if __name__ == "__main__":
    main()
