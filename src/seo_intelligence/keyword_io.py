"""
Keyword file import and export.

This module moves keyword results between projects and spreadsheet files:
- CSV files
- Excel files (.xlsx, .xls)

Imported rows go through the same merge path as generated keywords.
"""

from pathlib import Path
from typing import Optional, Union

import pandas as pd

from .models import COMPETITION_LEVELS, SEARCH_INTENTS, KeywordProject, KeywordResult


class KeywordFileError(Exception):
    """Raised when a keyword file cannot be read, parsed or written."""
    pass


# Common column name variations for keyword data
KEYWORD_COLUMN_VARIANTS = ["keyword", "keywords", "term", "query", "phrase"]
VOLUME_COLUMN_VARIANTS = ["volume", "search_volume", "searchvolume", "sv", "avg_monthly_searches"]
DIFFICULTY_COLUMN_VARIANTS = ["difficulty", "kd", "keyword_difficulty", "seo_difficulty"]
INTENT_COLUMN_VARIANTS = ["intent", "search_intent", "keyword_intent"]
COMPETITION_COLUMN_VARIANTS = ["competition", "comp", "competition_level"]

EXPORT_COLUMNS = ["keyword", "volume", "difficulty", "intent", "competition"]

# Shorthand accepted on import, mapped to canonical spelling
INTENT_ALIASES = {
    "info": "Informational",
    "i": "Informational",
    "comm": "Commercial",
    "c": "Commercial",
    "trans": "Transactional",
    "t": "Transactional",
    "nav": "Navigational",
    "n": "Navigational",
}


def _normalize_column_name(name: str) -> str:
    """Normalize column name for matching."""
    return str(name).lower().strip().replace(" ", "_").replace("-", "_")


def _find_column(df: pd.DataFrame, variants: list[str]) -> Optional[str]:
    """
    Find a column in the DataFrame matching one of the variant names.

    Args:
        df: The DataFrame to search.
        variants: List of possible column name variants.

    Returns:
        The actual column name if found, None otherwise.
    """
    normalized_columns = {_normalize_column_name(col): col for col in df.columns}

    for variant in variants:
        normalized = _normalize_column_name(variant)
        if normalized in normalized_columns:
            return normalized_columns[normalized]

    return None


def _read_frame(path: Path) -> pd.DataFrame:
    """Read a CSV or Excel file into a DataFrame."""
    suffix = path.suffix.lower()

    if suffix == ".csv":
        try:
            return pd.read_csv(path, encoding="utf-8")
        except UnicodeDecodeError:
            # Try alternative encoding
            try:
                return pd.read_csv(path, encoding="latin-1")
            except Exception as e:
                raise KeywordFileError(f"Failed to read CSV file: {e}")
        except Exception as e:
            raise KeywordFileError(f"Failed to read CSV file: {e}")

    if suffix in (".xlsx", ".xls"):
        try:
            return pd.read_excel(path)
        except Exception as e:
            raise KeywordFileError(f"Failed to read Excel file: {e}")

    raise KeywordFileError(
        f"Unsupported file format: {suffix}. Supported formats: .csv, .xlsx, .xls"
    )


def _canonical(value: str, allowed: tuple[str, ...], aliases: dict[str, str]) -> Optional[str]:
    """Match a cell value to its canonical spelling, case-insensitively."""
    lowered = value.strip().lower()
    for option in allowed:
        if option.lower() == lowered:
            return option
    return aliases.get(lowered)


def _format_volume(value) -> str:
    """Volume is a free-form range string; whole numbers lose their '.0'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def load_keyword_results(file_path: Union[str, Path]) -> list[KeywordResult]:
    """
    Load keyword results from a CSV or Excel file.

    All five columns (keyword, volume, difficulty, intent, competition) are
    required. Rows with an empty keyword are skipped.

    Args:
        file_path: Path to the keyword file.

    Returns:
        List of KeywordResult objects in file order.

    Raises:
        KeywordFileError: If the file is missing, unreadable or invalid.
    """
    path = Path(file_path)

    if not path.exists():
        raise KeywordFileError(f"File not found: {file_path}")

    df = _read_frame(path)
    if df.empty:
        raise KeywordFileError("Keyword file is empty")

    columns = {
        "keyword": _find_column(df, KEYWORD_COLUMN_VARIANTS),
        "volume": _find_column(df, VOLUME_COLUMN_VARIANTS),
        "difficulty": _find_column(df, DIFFICULTY_COLUMN_VARIANTS),
        "intent": _find_column(df, INTENT_COLUMN_VARIANTS),
        "competition": _find_column(df, COMPETITION_COLUMN_VARIANTS),
    }
    missing = [name for name, col in columns.items() if col is None]
    if missing:
        raise KeywordFileError(
            f"Missing required column(s): {', '.join(missing)}. "
            f"Found columns: {', '.join(str(c) for c in df.columns)}"
        )

    results: list[KeywordResult] = []

    for idx, row in df.iterrows():
        row_num = idx + 2  # 1-indexed header + data

        phrase = row[columns["keyword"]]
        if pd.isna(phrase) or not str(phrase).strip():
            continue

        raw_difficulty = row[columns["difficulty"]]
        try:
            difficulty_value = float(raw_difficulty)
        except (ValueError, TypeError):
            raise KeywordFileError(f"Row {row_num}: difficulty '{raw_difficulty}' is not a number")
        if pd.isna(difficulty_value) or not difficulty_value.is_integer() or not 0 <= difficulty_value <= 100:
            raise KeywordFileError(
                f"Row {row_num}: difficulty must be a whole number from 0 to 100, got '{raw_difficulty}'"
            )

        raw_intent = row[columns["intent"]]
        intent = None if pd.isna(raw_intent) else _canonical(str(raw_intent), SEARCH_INTENTS, INTENT_ALIASES)
        if intent is None:
            raise KeywordFileError(
                f"Row {row_num}: intent '{raw_intent}' must be one of {', '.join(SEARCH_INTENTS)}"
            )

        raw_competition = row[columns["competition"]]
        competition = (
            None if pd.isna(raw_competition)
            else _canonical(str(raw_competition), COMPETITION_LEVELS, {})
        )
        if competition is None:
            raise KeywordFileError(
                f"Row {row_num}: competition '{raw_competition}' must be one of "
                f"{', '.join(COMPETITION_LEVELS)}"
            )

        raw_volume = row[columns["volume"]]
        results.append(
            KeywordResult(
                keyword=str(phrase).strip(),
                volume="" if pd.isna(raw_volume) else _format_volume(raw_volume),
                difficulty=int(difficulty_value),
                intent=intent,  # type: ignore[arg-type]
                competition=competition,  # type: ignore[arg-type]
            )
        )

    if not results:
        raise KeywordFileError("No valid keywords found in file")

    return results


def export_keywords(project: KeywordProject, file_path: Union[str, Path]) -> Path:
    """
    Write a project's keywords to a CSV or Excel file.

    Args:
        project: Project whose keywords are exported, in stored order.
        file_path: Destination; the suffix selects the format.

    Returns:
        Path of the written file.

    Raises:
        KeywordFileError: If the format is unsupported or writing fails.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()
    df = pd.DataFrame([kw.to_dict() for kw in project.keywords], columns=EXPORT_COLUMNS)

    try:
        if suffix == ".csv":
            df.to_csv(path, index=False)
        elif suffix == ".xlsx":
            df.to_excel(path, index=False)
        else:
            raise KeywordFileError(
                f"Unsupported export format: {suffix}. Supported formats: .csv, .xlsx"
            )
    except OSError as e:
        raise KeywordFileError(f"Failed to write keyword file: {e}")

    return path
