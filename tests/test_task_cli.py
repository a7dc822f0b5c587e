"""Task CLI behaviour"""

import json
import subprocess
import sys
from pathlib import Path


def run_cli(args: list[str], db_path: Path, user: str = "alice") -> subprocess.CompletedProcess:
    cmd = [
        sys.executable,
        "-m",
        "adaptive_planner.tasks",
        "--db-path",
        str(db_path),
        "--user",
        user,
    ] + args
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        cwd=Path(__file__).parent.parent,
    )


def add_task(db_path: Path, title: str, deadline: str, *extra: str) -> dict:
    result = run_cli(
        ["add", "--title", title, "--deadline", deadline, "--format", "json", *extra],
        db_path,
    )
    assert result.returncode == 0, result.stderr
    return json.loads(result.stdout)


def test_cli_list_empty(tmp_path):
    db_path = tmp_path / "cli.db"
    result = run_cli(["list", "--format", "json"], db_path)
    assert result.returncode == 0
    assert json.loads(result.stdout) == []

    result = run_cli(["list"], db_path)
    assert "No tasks yet" in result.stdout


def test_cli_add_update_complete_delete(tmp_path):
    db_path = tmp_path / "cli.db"
    added = add_task(
        db_path,
        "Prepare slides",
        "2025-12-15T10:00",
        "--priority",
        "high",
        "--energy",
        "low",
        "--category",
        "Work",
        "--description",
        "Quarterly review",
    )
    assert added["title"] == "Prepare slides"
    assert added["priority"] == "high"
    assert added["required_energy"] == "low"
    assert added["deadline"] == "2025-12-15T10:00:00"
    task_id = str(added["id"])

    result = run_cli(["update", "--id", task_id, "--clear-description", "--format", "json"], db_path)
    assert result.returncode == 0
    assert json.loads(result.stdout)["description"] is None

    result = run_cli(["complete", "--id", task_id, "--format", "json"], db_path)
    assert json.loads(result.stdout)["is_completed"] is True

    result = run_cli(["list", "--filter", "completed", "--format", "json"], db_path)
    assert [t["id"] for t in json.loads(result.stdout)] == [added["id"]]

    result = run_cli(["delete", "--id", task_id, "--format", "json"], db_path)
    assert json.loads(result.stdout) == {"deleted": True, "id": added["id"]}


def test_cli_tasks_are_scoped_to_user(tmp_path):
    db_path = tmp_path / "cli.db"
    added = add_task(db_path, "Secret", "2025-12-01")

    result = run_cli(["get", "--id", str(added["id"])], db_path, user="bob")
    assert result.returncode == 1
    assert "not found" in result.stderr

    result = run_cli(["list", "--format", "json"], db_path, user="bob")
    assert json.loads(result.stdout) == []


def test_cli_rejects_invalid_deadline(tmp_path):
    result = run_cli(["add", "--title", "Bad", "--deadline", "next friday"], tmp_path / "cli.db")
    assert result.returncode == 1
    assert "invalid deadline" in result.stderr


def test_cli_prioritized_text(tmp_path):
    db_path = tmp_path / "cli.db"
    add_task(db_path, "Someday", "2099-01-01", "--priority", "low")
    add_task(db_path, "Urgent", "2000-01-01", "--priority", "high")

    result = run_cli(["prioritized", "--mood", "happy", "--energy", "medium"], db_path)
    assert result.returncode == 0
    lines = result.stdout.strip().splitlines()
    assert lines[0].startswith("1. ")
    assert "Urgent" in lines[0]
    assert "Someday" in lines[1]
