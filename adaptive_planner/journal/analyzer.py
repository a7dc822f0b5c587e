"""
JournalAnalyzer: LLM reflection on a journal entry

- asks for a JSON object with mood / feedback / actionableSteps
- missing keys are filled with neutral defaults
- any client or parse failure ends in the error analysis instead of raising
"""

import json
import logging
from typing import Any, Dict, List, Optional

from ..core.openrouter_client import strip_code_fence
from .models import ERROR_MOOD

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an empathetic AI journaling assistant. Your goal is to help the user "
    "reflect and feel understood. "
    'Respond ONLY with a valid JSON object with three keys: "mood", "feedback", and "actionableSteps". '
    'The "mood" must be a single string: "Positive", "Negative", "Neutral", or "Mixed". '
    'The "feedback" must be a 2-3 sentence supportive paragraph. '
    'The "actionableSteps" must be an array of 2-3 short, actionable suggestions as strings.'
)

DEFAULT_MOOD = "Neutral"
DEFAULT_FEEDBACK = "Thank you for sharing."
ERROR_FEEDBACK = "Could not analyze entry. Please try again later."


def error_analysis() -> Dict[str, Any]:
    return {"mood": ERROR_MOOD, "feedback": ERROR_FEEDBACK, "actionableSteps": []}


class JournalAnalyzer:
    """Mood, feedback and next steps for a journal entry"""

    def __init__(self, ai_client: Optional[Any] = None):
        """
        Args:
            ai_client: object with chat(messages, return_json=..., temperature=...)
        """
        self.ai_client = ai_client

    def analyze_journal_entry(self, text: str) -> Dict[str, Any]:
        """
        Analyze one entry

        Returns:
            {"mood": str, "feedback": str, "actionableSteps": list[str]}
        """
        if self.ai_client is None:
            logger.warning("No AI client configured, journal analysis skipped")
            return error_analysis()

        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": text},
        ]
        try:
            reply = self.ai_client.chat(messages, return_json=True, temperature=0.7)
            payload = self._coerce_payload(reply)
        except Exception as e:
            logger.error("Journal analysis failed: %s", e)
            return error_analysis()

        return {
            "mood": str(payload.get("mood") or DEFAULT_MOOD),
            "feedback": str(payload.get("feedback") or DEFAULT_FEEDBACK),
            "actionableSteps": self._coerce_steps(payload.get("actionableSteps")),
        }

    def test_connection(self) -> bool:
        """True when a trivial entry gets a real analysis back."""
        result = self.analyze_journal_entry("Today was a normal day.")
        return result["mood"] != ERROR_MOOD

    @staticmethod
    def _coerce_payload(reply: Any) -> Dict[str, Any]:
        if isinstance(reply, str):
            reply = json.loads(strip_code_fence(reply))
        if not isinstance(reply, dict):
            raise ValueError(f"unexpected analysis payload: {type(reply).__name__}")
        return reply

    @staticmethod
    def _coerce_steps(value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        return [str(step) for step in value if str(step).strip()]
