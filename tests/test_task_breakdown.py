"""TaskBreakdownService tests with a mocked chat client"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from adaptive_planner.tasks.breakdown import (
    DEFAULT_SUBTASKS,
    GENERIC_FALLBACK,
    TaskBreakdownService,
)
from adaptive_planner.tasks.models import TaskPriority

DEADLINE = datetime(2025, 9, 1, 12, 0)


@pytest.fixture
def mock_client():
    return MagicMock()


def test_breakdown_parses_json_array(mock_client):
    mock_client.chat.return_value = '["Outline chapters", "Write draft", "Proofread"]'
    service = TaskBreakdownService(mock_client)

    result = service.breakdown_task("Write essay", None, TaskPriority.HIGH, DEADLINE)

    assert result == ["Outline chapters", "Write draft", "Proofread"]
    mock_client.chat.assert_called_once()
    _, kwargs = mock_client.chat.call_args
    assert kwargs["return_json"] is False
    assert kwargs["temperature"] == 0.3


def test_breakdown_accepts_fenced_and_wrapped_json(mock_client):
    mock_client.chat.return_value = '```json\n{"subtasks": ["A step", "B step"]}\n```'
    service = TaskBreakdownService(mock_client)

    assert service.breakdown_task("Chores", "", TaskPriority.LOW, DEADLINE) == ["A step", "B step"]


def test_parse_subtasks_caps_json_list():
    reply = "[" + ", ".join(f'"step {i}"' for i in range(12)) + "]"
    assert len(TaskBreakdownService.parse_subtasks(reply)) == 8


def test_parse_subtasks_from_numbered_text():
    reply = "Here you go:\n1. Gather receipts\n2. Fill in the form\n- Submit online\n"
    result = TaskBreakdownService.parse_subtasks(reply)
    assert result[-3:] == ["Gather receipts", "Fill in the form", "Submit online"]


def test_parse_subtasks_non_list_json_falls_back_to_text():
    assert TaskBreakdownService.parse_subtasks("true") == DEFAULT_SUBTASKS


def test_client_error_uses_keyword_fallback(mock_client):
    mock_client.chat.side_effect = RuntimeError("connection refused")
    service = TaskBreakdownService(mock_client)

    result = service.breakdown_task("Research paper", None, TaskPriority.MEDIUM, DEADLINE)
    assert result[0] == "Define research objectives and scope"


def test_no_client_uses_generic_fallback():
    service = TaskBreakdownService()
    assert service.breakdown_task("Water plants", None, TaskPriority.LOW, DEADLINE) == GENERIC_FALLBACK


def test_prompt_mentions_task_details():
    prompt = TaskBreakdownService.build_prompt(
        "Plan trip", "Italy in May", TaskPriority.HIGH, DEADLINE, datetime(2025, 8, 1)
    )
    assert "Plan trip" in prompt
    assert "Italy in May" in prompt
    assert "JSON ARRAY" in prompt
