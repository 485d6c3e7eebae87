"""Tests for mapping smart analyses to the legacy shape."""

import pytest

from seo_intelligence.models import SmartSEOAnalysis
from seo_intelligence.result_adapter import count_words, to_legacy_analysis


class TestToLegacyAnalysis:
    """Tests for to_legacy_analysis."""

    def test_maps_fields(self, smart_analysis_payload):
        """Test the full mapping of a rich analysis."""
        rich = SmartSEOAnalysis.from_dict(smart_analysis_payload)

        legacy = to_legacy_analysis(rich, "a b c")

        assert legacy.to_dict() == {
            "score": 72,
            "readability": "Grade 8",
            "wordCount": 3,
            "suggestions": ["Missing H1", "No meta description"],
            "missingKeywords": [],
            "headingStructure": "Good",
        }

    def test_deterministic(self, smart_analysis_payload):
        """Test that the same input always maps to the same output."""
        rich = SmartSEOAnalysis.from_dict(smart_analysis_payload)
        assert to_legacy_analysis(rich, "one two") == to_legacy_analysis(rich, "one two")

    def test_suggestions_are_a_copy(self, smart_analysis_payload):
        """Test that the legacy view does not share the issues list."""
        rich = SmartSEOAnalysis.from_dict(smart_analysis_payload)

        legacy = to_legacy_analysis(rich, "text")
        legacy.suggestions.append("extra")

        assert rich.critical_issues == ["Missing H1", "No meta description"]


class TestCountWords:
    """Tests for the local word count."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("", 0),
            ("   \n\t ", 0),
            ("single", 1),
            ("  leading and trailing  ", 3),
            ("tabs\tand\nnewlines  count", 4),
        ],
    )
    def test_count(self, text, expected):
        """Test that runs of whitespace separate words."""
        assert count_words(text) == expected
