#!/usr/bin/env python3
"""
Task management CLI

Usage:
    python -m adaptive_planner.tasks --user UID list [--filter all|incomplete|completed|overdue] [--category NAME] [--format json|text]
    python -m adaptive_planner.tasks --user UID add --title "Title" --deadline YYYY-MM-DD[THH:MM] [--priority high|medium|low] [--energy high|medium|low] [--category NAME] [--description "..."]
    python -m adaptive_planner.tasks --user UID update --id ID [--title ...] [--deadline ...] [--priority ...] [--energy ...] [--category ...] [--description ...] [--clear-description]
    python -m adaptive_planner.tasks --user UID complete --id ID
    python -m adaptive_planner.tasks --user UID delete --id ID
    python -m adaptive_planner.tasks --user UID get --id ID
    python -m adaptive_planner.tasks --user UID prioritized [--mood MOOD] [--energy LEVEL]
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.database import UNSET
from .filters import TaskCompletionFilter, empty_list_message, filter_tasks
from .models import Task, TaskEnergyLevel, TaskPriority
from .prioritization import prioritize_tasks
from .repository import TaskRepository

LEVELS = ["high", "medium", "low"]


def format_task_text(task: Task) -> str:
    """One-line text rendering of a task"""
    mark = "x" if task.is_completed else " "
    deadline = task.deadline.strftime("%Y-%m-%d %H:%M")
    line = (
        f"[{task.id}] [{mark}] {task.title} | due {deadline} | "
        f"{task.priority.value} priority | {task.required_energy.value} energy | {task.category}"
    )
    if task.subtasks:
        line += f" | subtasks {task.completed_subtask_count}/{len(task.subtasks)}"
    return line


def format_task_json(task: Task) -> Dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "deadline": task.deadline.isoformat(),
        "priority": task.priority.value,
        "category": task.category,
        "required_energy": task.required_energy.value,
        "is_completed": task.is_completed,
        "subtasks": [s.to_dict() for s in task.subtasks],
        "created_at": task.created_at,
        "updated_at": task.updated_at,
    }


def _parse_deadline(value: str) -> datetime:
    return datetime.fromisoformat(value)


def _emit(task: Task, output_format: str, prefix: str = "") -> None:
    if output_format == "json":
        print(json.dumps(format_task_json(task), ensure_ascii=False))
    else:
        print(f"{prefix}{format_task_text(task)}")


def cmd_list(
    repo: TaskRepository,
    user_id: str,
    completion: str,
    category: Optional[str],
    output_format: str,
) -> int:
    completion_filter = TaskCompletionFilter(completion)
    items = filter_tasks(repo.list(user_id), category=category, completion=completion_filter)
    if output_format == "json":
        print(json.dumps([format_task_json(item) for item in items], ensure_ascii=False))
    elif not items:
        print(empty_list_message(category, completion_filter))
    else:
        for item in items:
            print(format_task_text(item))
    return 0


def cmd_add(repo: TaskRepository, user_id: str, args: argparse.Namespace) -> int:
    if not args.title.strip():
        print("Error: title is required.", file=sys.stderr)
        return 1
    try:
        deadline = _parse_deadline(args.deadline)
    except ValueError:
        print(f"Error: invalid deadline: {args.deadline}", file=sys.stderr)
        return 1

    try:
        created = repo.create(
            user_id=user_id,
            title=args.title.strip(),
            deadline=deadline,
            priority=TaskPriority(args.priority),
            category=args.category,
            required_energy=TaskEnergyLevel(args.energy),
            description=args.description.strip() if args.description else None,
        )
    except Exception as exc:
        print(f"Error: failed to add task: {exc}", file=sys.stderr)
        return 1
    _emit(created, args.format, "Added: ")
    return 0


def cmd_update(repo: TaskRepository, user_id: str, args: argparse.Namespace) -> int:
    if repo.get(args.id, user_id) is None:
        print(f"Error: task {args.id} not found.", file=sys.stderr)
        return 1

    try:
        deadline = _parse_deadline(args.deadline) if args.deadline else None
    except ValueError:
        print(f"Error: invalid deadline: {args.deadline}", file=sys.stderr)
        return 1

    description: Any = UNSET
    if args.clear_description:
        description = None
    elif args.description is not None:
        description = args.description.strip()

    try:
        updated = repo.update(
            args.id,
            title=args.title.strip() if args.title else None,
            description=description,
            deadline=deadline,
            priority=TaskPriority(args.priority) if args.priority else None,
            category=args.category,
            required_energy=TaskEnergyLevel(args.energy) if args.energy else None,
        )
    except Exception as exc:
        print(f"Error: failed to update task: {exc}", file=sys.stderr)
        return 1
    _emit(updated, args.format, "Updated: ")
    return 0


def cmd_complete(repo: TaskRepository, user_id: str, task_id: int, output_format: str) -> int:
    if repo.get(task_id, user_id) is None:
        print(f"Error: task {task_id} not found.", file=sys.stderr)
        return 1
    updated = repo.update(task_id, is_completed=True)
    _emit(updated, output_format, "Completed: ")
    return 0


def cmd_delete(repo: TaskRepository, user_id: str, task_id: int, output_format: str) -> int:
    if repo.get(task_id, user_id) is None or not repo.delete(task_id):
        print(f"Error: task {task_id} not found.", file=sys.stderr)
        return 1
    if output_format == "json":
        print(json.dumps({"deleted": True, "id": task_id}))
    else:
        print(f"Deleted: ID {task_id}")
    return 0


def cmd_get(repo: TaskRepository, user_id: str, task_id: int, output_format: str) -> int:
    task = repo.get(task_id, user_id)
    if task is None:
        print(f"Error: task {task_id} not found.", file=sys.stderr)
        return 1
    _emit(task, output_format)
    return 0


def cmd_prioritized(
    repo: TaskRepository,
    user_id: str,
    mood: Optional[str],
    energy: Optional[str],
    output_format: str,
) -> int:
    items = prioritize_tasks(repo.list(user_id), mood, energy)
    if output_format == "json":
        print(json.dumps([format_task_json(item) for item in items], ensure_ascii=False))
    else:
        for rank, item in enumerate(items, start=1):
            print(f"{rank}. {format_task_text(item)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Adaptive Planner task CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--db-path", type=str, help="SQLite database path")
    parser.add_argument("--user", required=True, help="owner user id")

    format_parent = argparse.ArgumentParser(add_help=False)
    format_parent.add_argument("--format", choices=["json", "text"], default="text")

    subparsers = parser.add_subparsers(dest="command", required=True)

    parser_list = subparsers.add_parser("list", parents=[format_parent], help="list tasks")
    parser_list.add_argument(
        "--filter", choices=[f.value for f in TaskCompletionFilter], default="all"
    )
    parser_list.add_argument("--category")

    parser_add = subparsers.add_parser("add", parents=[format_parent], help="add a task")
    parser_add.add_argument("--title", required=True)
    parser_add.add_argument("--deadline", required=True, help="ISO date or datetime")
    parser_add.add_argument("--description")
    parser_add.add_argument("--priority", choices=LEVELS, default="medium")
    parser_add.add_argument("--energy", choices=LEVELS, default="medium")
    parser_add.add_argument("--category", default="Personal")

    parser_update = subparsers.add_parser("update", parents=[format_parent], help="update a task")
    parser_update.add_argument("--id", type=int, required=True)
    parser_update.add_argument("--title")
    parser_update.add_argument("--deadline")
    parser_update.add_argument("--description")
    parser_update.add_argument("--clear-description", action="store_true")
    parser_update.add_argument("--priority", choices=LEVELS)
    parser_update.add_argument("--energy", choices=LEVELS)
    parser_update.add_argument("--category")

    for name, help_text in (
        ("complete", "mark a task completed"),
        ("delete", "delete a task"),
        ("get", "show one task"),
    ):
        sub = subparsers.add_parser(name, parents=[format_parent], help=help_text)
        sub.add_argument("--id", type=int, required=True)

    parser_prioritized = subparsers.add_parser(
        "prioritized", parents=[format_parent], help="tasks ordered for the current mood/energy"
    )
    parser_prioritized.add_argument("--mood")
    parser_prioritized.add_argument("--energy", choices=LEVELS)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    repo = TaskRepository(db_path=args.db_path if args.db_path else None)
    user_id = args.user

    if args.command == "list":
        return cmd_list(repo, user_id, args.filter, args.category, args.format)
    elif args.command == "add":
        return cmd_add(repo, user_id, args)
    elif args.command == "update":
        return cmd_update(repo, user_id, args)
    elif args.command == "complete":
        return cmd_complete(repo, user_id, args.id, args.format)
    elif args.command == "delete":
        return cmd_delete(repo, user_id, args.id, args.format)
    elif args.command == "get":
        return cmd_get(repo, user_id, args.id, args.format)
    elif args.command == "prioritized":
        return cmd_prioritized(repo, user_id, args.mood, args.energy, args.format)
    print(f"Error: unknown command: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
