"""Task CLI entry point

Usage:
    python -m adaptive_planner.tasks --user UID <command> [options]
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
