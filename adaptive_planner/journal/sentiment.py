"""Sentiment scoring for journal text.

Two sources feed one result shape: a keyword heuristic that needs no network
and a conversion of the AI analyzer's mood label. Either result can then be
enhanced with intensity, text statistics and recommendations.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .models import JournalEntry

logger = logging.getLogger(__name__)

POSITIVE_WORDS = [
    "happy", "good", "great", "excellent", "amazing", "wonderful", "fantastic",
    "love", "like", "enjoy", "excited", "thrilled", "delighted", "pleased",
    "accomplished", "successful", "proud", "confident", "optimistic", "hopeful",
    "grateful", "thankful", "blessed", "content", "satisfied", "peaceful",
]

NEGATIVE_WORDS = [
    "sad", "bad", "terrible", "awful", "horrible", "hate", "dislike",
    "angry", "frustrated", "annoyed", "disappointed", "worried", "anxious",
    "stressed", "overwhelmed", "tired", "exhausted", "depressed", "upset",
    "difficult", "hard", "challenging", "struggling", "failed", "lost",
]

INTENSIFIERS = ["very", "extremely", "incredibly", "absolutely", "completely"]

_POSITIVE_MOODS = {"happy", "excited", "grateful", "confident"}
_NEGATIVE_MOODS = {"sad", "angry", "frustrated", "anxious", "stressed"}

_RECOMMENDATIONS = {
    ("positive", True): [
        "High energy detected! Perfect time for challenging tasks",
        "Consider tackling your most important goals",
        "Your mood suggests you can handle complex projects",
    ],
    ("positive", False): [
        "Good mood detected - great for productive work",
        "Consider organizing your task list",
        "Good time for collaborative activities",
    ],
    ("negative", True): [
        "Difficult emotions detected - be gentle with yourself",
        "Consider taking a short break or doing breathing exercises",
        "Focus on simple, routine tasks to build momentum",
    ],
    ("negative", False): [
        "Low mood noted - consider lighter tasks",
        "Maybe take a short break before continuing",
        "Some background music might help",
    ],
}

_NEUTRAL_RECOMMENDATIONS = [
    "Neutral mood - steady progress possible",
    "Good time for planning and organizing",
    "Consider setting clear goals for the day",
]

MIXED_EMOTIONS_HINT = "Mixed emotions detected - check in with yourself regularly"


def _word_count(text: str) -> int:
    # whitespace split, so an empty string still counts as one word
    return len(re.split(r"\s+", text))


def analyze_rule_based(text: str) -> Dict[str, Any]:
    lowered = text.lower()
    positive = sum(1 for word in POSITIVE_WORDS if word in lowered)
    negative = sum(1 for word in NEGATIVE_WORDS if word in lowered)
    total = max(_word_count(text), 1)
    strength = (positive - negative) / total

    if strength > 0.1:
        sentiment, confidence = "positive", min(0.8, 0.5 + strength)
    elif strength < -0.1:
        sentiment, confidence = "negative", min(0.8, 0.5 - strength)
    else:
        sentiment, confidence = "neutral", 0.6

    return {
        "sentiment": sentiment,
        "confidence": confidence,
        "scores": {
            "positive": positive / total,
            "negative": negative / total,
            "neutral": 1.0 - (positive + negative) / total,
        },
        "method": "rule_based",
        "word_counts": {"positive": positive, "negative": negative, "total": total},
    }


def scores_from_sentiment(sentiment: str, confidence: float) -> Dict[str, float]:
    rest = 1 - confidence
    if sentiment == "positive":
        return {"positive": confidence, "negative": rest * 0.2, "neutral": rest * 0.8}
    if sentiment == "negative":
        return {"positive": rest * 0.2, "negative": confidence, "neutral": rest * 0.8}
    return {"positive": rest * 0.4, "negative": rest * 0.4, "neutral": confidence + rest * 0.2}


def from_ai_analysis(analysis: Dict[str, Any]) -> Dict[str, Any]:
    """Map the analyzer's mood label onto the sentiment result shape."""
    mood = str(analysis.get("mood") or "neutral").lower()
    if mood in _POSITIVE_MOODS:
        sentiment, confidence = "positive", 0.85
    elif mood in _NEGATIVE_MOODS:
        sentiment, confidence = "negative", 0.85
    else:
        sentiment, confidence = "neutral", 0.7
    return {
        "sentiment": sentiment,
        "confidence": confidence,
        "scores": scores_from_sentiment(sentiment, confidence),
        "method": "ai",
        "ai_feedback": analysis.get("feedback") or "",
        "actionable_steps": list(analysis.get("actionableSteps") or []),
        "detected_mood": mood,
    }


def fallback_result(error: Exception) -> Dict[str, Any]:
    return {
        "sentiment": "neutral",
        "confidence": 0.5,
        "scores": {"positive": 0.33, "negative": 0.33, "neutral": 0.34},
        "method": "fallback",
        "error": str(error),
    }


def emotional_intensity(text: str) -> float:
    intensity = 0.5
    intensity += text.count("!") * 0.1
    intensity += text.count("?") * 0.05
    caps_words = [
        w for w in re.split(r"\s+", text)
        if len(w) > 2 and w == w.upper() and re.search(r"[A-Z]", w)
    ]
    intensity += len(caps_words) * 0.15
    # non-overlapping, like str.count
    intensity += text.count("!!") * 0.2
    tokens = re.split(r"\W+", text.lower())
    intensity += sum(tokens.count(word) for word in INTENSIFIERS) * 0.1
    return min(1.0, intensity)


def text_statistics(text: str) -> Dict[str, Any]:
    words = [w for w in re.split(r"\s+", text) if w]
    sentences = [s for s in re.split(r"[.!?]", text) if s.strip()]
    return {
        "word_count": len(words),
        "sentence_count": len(sentences),
        "character_count": len(text),
        "avg_word_length": sum(len(w) for w in words) / len(words) if words else 0,
        "exclamation_count": text.count("!"),
        "question_count": text.count("?"),
    }


def adaptive_recommendations(sentiment: str, confidence: float, intensity: float = 0.5) -> List[str]:
    recommendations = list(
        _RECOMMENDATIONS.get((sentiment, intensity > 0.7), _NEUTRAL_RECOMMENDATIONS)
    )
    if confidence < 0.6:
        recommendations.append(MIXED_EMOTIONS_HINT)
    return recommendations


def enhance_result(result: Dict[str, Any], text: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    intensity = emotional_intensity(text)
    return {
        **result,
        "emotional_intensity": intensity,
        "text_statistics": text_statistics(text),
        "adaptive_recommendations": adaptive_recommendations(
            result["sentiment"], result["confidence"], intensity
        ),
        "analysis_timestamp": (now or datetime.now()).isoformat(),
        "enhanced": True,
    }


def analyze_sentiment(text: str, analyzer: Optional[Any] = None) -> Dict[str, Any]:
    """AI-backed sentiment when an analyzer is given, keyword heuristic otherwise."""
    if analyzer is None:
        return enhance_result(analyze_rule_based(text), text)
    try:
        analysis = analyzer.analyze_journal_entry(text)
        result = from_ai_analysis(analysis)
    except Exception as e:
        logger.error("AI sentiment analysis failed: %s", e)
        result = fallback_result(e)
    return enhance_result(result, text)


def sentiment_summary(result: Dict[str, Any]) -> str:
    method_name = "Fallback" if result.get("method") == "fallback" else (
        "Rule-based" if result.get("method") == "rule_based" else "AI"
    )
    return (
        f"{result['sentiment']} sentiment detected with "
        f"{result['confidence'] * 100:.1f}% confidence using {method_name} analysis"
    )


def entry_sentiment(entry: JournalEntry) -> float:
    """0.0 (very negative) .. 1.0 (very positive) from mood label and feedback."""
    score = 0.5
    if entry.mood is not None:
        mood = entry.mood.lower()
        if any(k in mood for k in ("happy", "excited", "positive")):
            score = 0.8
        elif any(k in mood for k in ("sad", "angry", "negative")):
            score = 0.2
    if entry.ai_feedback is not None:
        feedback = entry.ai_feedback.lower()
        if any(k in feedback for k in ("positive", "great", "excellent")):
            score = (score + 0.8) / 2
        elif any(k in feedback for k in ("negative", "difficult", "challenge")):
            score = (score + 0.3) / 2
    return score


def average_journal_sentiment(entries: Iterable[JournalEntry]) -> float:
    items = list(entries)
    if not items:
        return 0.5
    return sum(entry_sentiment(e) for e in items) / len(items)
