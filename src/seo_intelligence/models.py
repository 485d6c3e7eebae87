"""
Data models for the content intelligence pipeline.

This module defines the core data structures passed between the normalizer,
the generation client, the result adapter, the keyword merge engine and the
store. Python attributes are snake_case; ``to_dict``/``from_dict`` use the
camelCase names of the persisted and wire JSON.
"""

import re
import time
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Union

from .config import GenerationProfile
from .errors import ValidationError
from .schemas import SchemaDescriptor


SearchIntent = Literal["Informational", "Commercial", "Transactional", "Navigational"]
CompetitionLevel = Literal["Low", "Medium", "High"]
HeadingStructure = Literal["Good", "Fair", "Poor"]

SEARCH_INTENTS: tuple[str, ...] = ("Informational", "Commercial", "Transactional", "Navigational")
COMPETITION_LEVELS: tuple[str, ...] = ("Low", "Medium", "High")
HEADING_STRUCTURES: tuple[str, ...] = ("Good", "Fair", "Poor")

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


# =============================================================================
# Normalized input
# =============================================================================


@dataclass(frozen=True)
class TextInput:
    """Plain text content ready to be sent to the generator."""
    content: str


@dataclass(frozen=True)
class BinaryInput:
    """
    Binary document passed through to the generator.

    ``data`` holds the base64 encoding of the file bytes (ASCII text).
    """
    data: str
    mime_type: str


NormalizedInput = Union[TextInput, BinaryInput]


@dataclass(frozen=True)
class GenerationRequest:
    """One logical request to the generation backend."""
    prompt_text: str
    attachment: Optional[NormalizedInput] = None
    output_schema: Optional[SchemaDescriptor] = None
    profile: GenerationProfile = "smart"
    max_tokens: int = 4096

    def __post_init__(self) -> None:
        """The instructive prompt is mandatory, with or without an attachment."""
        if not self.prompt_text or not self.prompt_text.strip():
            raise ValidationError("Generation request requires a non-empty prompt")


# =============================================================================
# Users and keyword projects
# =============================================================================


@dataclass(frozen=True)
class User:
    """The single local user of a store."""
    id: str
    email: str
    name: str

    @classmethod
    def create(cls, email: str, name: Optional[str] = None) -> "User":
        """
        Build a new user record from login details.

        Args:
            email: Email address; must look like ``local@domain.tld``.
            name: Display name. Defaults to the local part of the email.

        Returns:
            A User with a timestamp-based id.

        Raises:
            ValidationError: If the email is missing or malformed.
        """
        email = (email or "").strip()
        if not email or not _EMAIL_PATTERN.match(email):
            raise ValidationError("Please enter a valid email address.")
        display_name = (name or "").strip() or email.split("@")[0]
        return cls(id=f"u-{now_millis()}", email=email, name=display_name)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "email": self.email, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(id=str(data["id"]), email=data["email"], name=data["name"])


@dataclass(frozen=True)
class KeywordResult:
    """A single generated keyword opportunity."""
    keyword: str
    volume: str  # Estimated range, e.g. "1k-10k"
    difficulty: int  # 0-100
    intent: SearchIntent
    competition: CompetitionLevel

    def to_dict(self) -> dict[str, Any]:
        return {
            "keyword": self.keyword,
            "volume": self.volume,
            "difficulty": self.difficulty,
            "intent": self.intent,
            "competition": self.competition,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KeywordResult":
        return cls(
            keyword=data["keyword"],
            volume=data["volume"],
            difficulty=int(data["difficulty"]),
            intent=data["intent"],
            competition=data["competition"],
        )


@dataclass
class KeywordProject:
    """
    A named bucket of keywords for one domain.

    ``keywords`` is kept in first-seen order and never holds two entries
    with the same ``keyword`` text. Only the merge engine's save path
    changes it.
    """
    id: str
    name: str
    domain: str
    keywords: list[KeywordResult] = field(default_factory=list)
    created_at: int = field(default_factory=now_millis)  # epoch milliseconds

    @property
    def keyword_count(self) -> int:
        return len(self.keywords)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "domain": self.domain,
            "keywords": [kw.to_dict() for kw in self.keywords],
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KeywordProject":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            domain=data["domain"],
            keywords=[KeywordResult.from_dict(kw) for kw in data.get("keywords", [])],
            created_at=int(data["createdAt"]),
        )


# =============================================================================
# Analysis results
# =============================================================================


@dataclass(frozen=True)
class MetaTags:
    """Generated title, description and URL slug."""
    title: str
    description: str
    slug: str


@dataclass(frozen=True)
class InternalLink:
    """A suggested internal link and where it belongs."""
    anchor: str
    context: str


@dataclass
class SmartSEOAnalysis:
    """Rich content optimization result produced by the generator."""
    seo_score: int
    optimized_content: str  # Markdown
    meta: MetaTags
    schema_markup: str  # JSON-LD as text, not parsed here
    internal_links: list[InternalLink] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)
    critical_issues: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "seoScore": self.seo_score,
            "optimizedContent": self.optimized_content,
            "meta": {
                "title": self.meta.title,
                "description": self.meta.description,
                "slug": self.meta.slug,
            },
            "schemaMarkup": self.schema_markup,
            "internalLinks": [
                {"anchor": link.anchor, "context": link.context}
                for link in self.internal_links
            ],
            "insights": list(self.insights),
            "criticalIssues": list(self.critical_issues),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SmartSEOAnalysis":
        meta = data["meta"]
        return cls(
            seo_score=data["seoScore"],
            optimized_content=data["optimizedContent"],
            meta=MetaTags(title=meta["title"], description=meta["description"], slug=meta["slug"]),
            schema_markup=data["schemaMarkup"],
            internal_links=[
                InternalLink(anchor=link["anchor"], context=link["context"])
                for link in data["internalLinks"]
            ],
            insights=list(data["insights"]),
            critical_issues=list(data["criticalIssues"]),
        )


@dataclass
class ContentAnalysis:
    """Legacy quick-analysis view, derived from a SmartSEOAnalysis."""
    score: int
    readability: str
    word_count: int
    suggestions: list[str] = field(default_factory=list)
    missing_keywords: list[str] = field(default_factory=list)
    heading_structure: HeadingStructure = "Good"

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "readability": self.readability,
            "wordCount": self.word_count,
            "suggestions": list(self.suggestions),
            "missingKeywords": list(self.missing_keywords),
            "headingStructure": self.heading_structure,
        }


@dataclass(frozen=True)
class StrategyPlan:
    """Presentation-ready strategy text/HTML fragment."""
    strategy: str

    def to_dict(self) -> dict[str, Any]:
        return {"strategy": self.strategy}


# =============================================================================
# Requests
# =============================================================================


@dataclass(frozen=True)
class ContentAnalysisRequest:
    """
    Smart content analysis request.

    Exactly one of ``text`` or ``base64`` must be provided; ``base64``
    requires ``mime_type``. Checked by the pipeline, not here, so that the
    failure comes back as a Result.
    """
    text: Optional[str] = None
    base64: Optional[str] = None
    mime_type: Optional[str] = None
    content_type: str = "general"
    audience: str = "general"
    goal: str = "optimize"
