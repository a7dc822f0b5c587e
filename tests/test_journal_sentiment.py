from datetime import datetime
from unittest.mock import MagicMock

import pytest

from adaptive_planner.journal import JournalEntry
from adaptive_planner.journal.sentiment import (
    MIXED_EMOTIONS_HINT,
    adaptive_recommendations,
    analyze_rule_based,
    analyze_sentiment,
    average_journal_sentiment,
    emotional_intensity,
    entry_sentiment,
    sentiment_summary,
    text_statistics,
)


def make_entry(mood=None, feedback=None):
    return JournalEntry(id=1, user_id="u", text="x", date=datetime(2025, 1, 1), mood=mood, ai_feedback=feedback)


def test_rule_based_positive():
    result = analyze_rule_based("I feel happy and grateful today")
    assert result["sentiment"] == "positive"
    assert result["confidence"] == 0.8
    assert result["method"] == "rule_based"
    assert result["word_counts"] == {"positive": 2, "negative": 0, "total": 6}


def test_rule_based_negative():
    result = analyze_rule_based("I am stressed and tired")
    assert result["sentiment"] == "negative"
    assert result["scores"]["negative"] == pytest.approx(0.4)


def test_rule_based_neutral():
    result = analyze_rule_based("The meeting is at noon")
    assert result["sentiment"] == "neutral"
    assert result["confidence"] == 0.6


def test_emotional_intensity():
    assert emotional_intensity("fine") == 0.5
    assert emotional_intensity("WOW this is GREAT!!") == 1.0
    assert emotional_intensity("very tired?") == pytest.approx(0.65)


def test_text_statistics():
    stats = text_statistics("Hello world. How are you?")
    assert stats["word_count"] == 5
    assert stats["sentence_count"] == 2
    assert stats["question_count"] == 1


def test_adaptive_recommendations():
    assert adaptive_recommendations("positive", 0.8, 0.9)[0].startswith("High energy detected")
    assert adaptive_recommendations("positive", 0.8, 0.5)[0].startswith("Good mood detected")
    low_confidence = adaptive_recommendations("negative", 0.5, 0.5)
    assert low_confidence[-1] == MIXED_EMOTIONS_HINT
    assert adaptive_recommendations("neutral", 0.6)[0].startswith("Neutral mood")


def test_analyze_sentiment_without_analyzer_is_enhanced():
    result = analyze_sentiment("What a wonderful day!")
    assert result["method"] == "rule_based"
    assert result["enhanced"] is True
    assert result["emotional_intensity"] == pytest.approx(0.6)
    assert "analysis_timestamp" in result


def test_analyze_sentiment_with_analyzer():
    analyzer = MagicMock()
    analyzer.analyze_journal_entry.return_value = {
        "mood": "Happy",
        "feedback": "Lovely.",
        "actionableSteps": ["Celebrate"],
    }

    result = analyze_sentiment("I got the job", analyzer)

    assert result["method"] == "ai"
    assert result["sentiment"] == "positive"
    assert result["confidence"] == 0.85
    assert result["actionable_steps"] == ["Celebrate"]
    assert "AI analysis" in sentiment_summary(result)


def test_analyze_sentiment_falls_back_on_error():
    analyzer = MagicMock()
    analyzer.analyze_journal_entry.side_effect = RuntimeError("down")

    result = analyze_sentiment("anything", analyzer)

    assert result["method"] == "fallback"
    assert result["error"] == "down"
    assert sentiment_summary(result).startswith("neutral sentiment detected with 50.0%")


def test_entry_sentiment():
    assert entry_sentiment(make_entry()) == 0.5
    assert entry_sentiment(make_entry("Positive", "A great effort")) == pytest.approx(0.8)
    assert entry_sentiment(make_entry("Negative", "A difficult week")) == pytest.approx(0.25)


def test_average_journal_sentiment():
    assert average_journal_sentiment([]) == 0.5
    entries = [make_entry("Positive"), make_entry("Negative")]
    assert average_journal_sentiment(entries) == pytest.approx(0.5)
