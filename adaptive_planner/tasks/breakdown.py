"""
TaskBreakdownService: splits a task into subtask titles with an LLM

- asks the model for a JSON array of 3-6 subtasks
- tolerates code fences and plain numbered/bulleted lists in the reply
- falls back to keyword-based templates when the model is unreachable
"""

import json
import logging
import re
from datetime import datetime
from typing import Any, List, Optional

from ..core.openrouter_client import strip_code_fence
from .models import TaskPriority

logger = logging.getLogger(__name__)

MAX_PARSED_SUBTASKS = 8
MAX_TEXT_SUBTASKS = 6

_LIST_LINE = re.compile(r"^[\d\-\*•]\s*\.?\s*(.+)$")

DEFAULT_SUBTASKS = [
    "Plan and organize approach",
    "Complete the main work",
    "Review and finalize",
]

_KEYWORD_FALLBACKS = [
    (
        ("research", "study"),
        [
            "Define research objectives and scope",
            "Gather relevant sources and materials",
            "Review and analyze key information",
            "Organize findings and take notes",
            "Summarize results and conclusions",
        ],
    ),
    (
        ("project", "assignment"),
        [
            "Plan project structure and timeline",
            "Gather necessary resources",
            "Complete initial draft or prototype",
            "Review and refine work",
            "Finalize and submit deliverables",
        ],
    ),
    (
        ("presentation", "report"),
        [
            "Research topic and gather content",
            "Create outline and structure",
            "Develop main content sections",
            "Design visuals or formatting",
            "Practice and final review",
        ],
    ),
]

GENERIC_FALLBACK = [
    "Break down the main task requirements",
    "Gather necessary resources and information",
    "Complete the core work",
    "Review and refine the results",
    "Finalize and complete the task",
]


class TaskBreakdownService:
    """LLM-backed subtask generator"""

    def __init__(self, ai_client: Optional[Any] = None):
        """
        Args:
            ai_client: object with chat(messages, return_json=..., temperature=...)
        """
        self.ai_client = ai_client

    def breakdown_task(
        self,
        title: str,
        description: Optional[str],
        priority: TaskPriority,
        deadline: datetime,
        now: Optional[datetime] = None,
    ) -> List[str]:
        """
        Suggest subtask titles for a task

        Returns:
            Between 1 and 8 subtask titles. Never raises: AI failures end in
            the keyword fallback.
        """
        logger.info("Breaking down task: %s", title)
        if self.ai_client is None:
            return self.fallback_subtasks(title)

        prompt = self.build_prompt(title, description, priority, deadline, now)
        try:
            reply = self.ai_client.chat(
                [{"role": "user", "content": prompt}],
                return_json=False,
                temperature=0.3,
            )
        except Exception as e:
            logger.error("Task breakdown failed, using fallback: %s", e)
            return self.fallback_subtasks(title)

        subtasks = self.parse_subtasks(str(reply))
        logger.info("Generated %d subtasks", len(subtasks))
        return subtasks

    @staticmethod
    def build_prompt(
        title: str,
        description: Optional[str],
        priority: TaskPriority,
        deadline: datetime,
        now: Optional[datetime] = None,
    ) -> str:
        now = now or datetime.now()
        days_until_deadline = (deadline - now).days
        description_text = description if description else "No additional details provided."
        return f"""You are a productivity assistant helping break down complex tasks into manageable subtasks.

TASK TO BREAKDOWN:
Title: "{title}"
Description: {description_text}
Priority: {priority.value.upper()}
Days until deadline: {days_until_deadline}

INSTRUCTIONS:
1. Break this task into 3-6 actionable subtasks
2. Make each subtask specific, measurable, and achievable
3. Order subtasks logically (what should be done first)
4. Consider the deadline and priority level
5. Each subtask should take 15 minutes to 2 hours maximum
6. Use action verbs (Research, Create, Review, Contact, etc.)

RESPOND WITH ONLY A JSON ARRAY:
["Subtask 1", "Subtask 2", "Subtask 3", "etc"]
"""

    @classmethod
    def parse_subtasks(cls, reply: str) -> List[str]:
        try:
            parsed = json.loads(strip_code_fence(reply))
            if isinstance(parsed, dict):
                # some models wrap the array: {"subtasks": [...]}
                parsed = next((v for v in parsed.values() if isinstance(v, list)), [])
            if isinstance(parsed, list):
                subtasks = [str(item).strip() for item in parsed if str(item).strip()]
                if subtasks:
                    return subtasks[:MAX_PARSED_SUBTASKS]
        except json.JSONDecodeError:
            logger.warning("Breakdown reply was not a JSON array: %r", reply[:200])
        return cls.extract_from_text(reply)

    @staticmethod
    def extract_from_text(reply: str) -> List[str]:
        subtasks: List[str] = []
        for line in (raw.strip() for raw in reply.splitlines()):
            if not line or len(subtasks) >= MAX_TEXT_SUBTASKS:
                continue
            match = _LIST_LINE.match(line)
            if match:
                subtask = match.group(1).strip()
                if subtask:
                    subtasks.append(subtask)
            elif 10 < len(line) < 100:
                subtasks.append(line)
        return subtasks or list(DEFAULT_SUBTASKS)

    @staticmethod
    def fallback_subtasks(title: str) -> List[str]:
        lowered = title.lower()
        for keywords, subtasks in _KEYWORD_FALLBACKS:
            if any(keyword in lowered for keyword in keywords):
                return list(subtasks)
        return list(GENERIC_FALLBACK)
