"""Map the rich smart analysis onto the legacy quick-analysis shape."""

from .models import ContentAnalysis, SmartSEOAnalysis

# The rich shape carries no readability or heading signal
DEFAULT_READABILITY = "Grade 8"
DEFAULT_HEADING_STRUCTURE = "Good"


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens. Empty or blank text counts 0."""
    return len(text.split())


def to_legacy_analysis(rich: SmartSEOAnalysis, original_content: str) -> ContentAnalysis:
    """
    Derive a ContentAnalysis from a SmartSEOAnalysis.

    Pure and total. ``missing_keywords`` is always empty: the rich shape has
    no equivalent field, and none are invented.

    Args:
        rich: Smart analysis returned by the generator.
        original_content: The text that was analyzed (for the word count).

    Returns:
        The legacy analysis view.
    """
    return ContentAnalysis(
        score=rich.seo_score,
        readability=DEFAULT_READABILITY,
        word_count=count_words(original_content),
        suggestions=list(rich.critical_issues),
        missing_keywords=[],
        heading_structure=DEFAULT_HEADING_STRUCTURE,
    )
