"""
Content intelligence pipeline orchestration.

This module coordinates every user action:
- Validates requests before any generation call
- Normalizes documents and builds prompts
- Calls the generation client with the operation's output schema
- Adapts smart analyses to the legacy quick-analysis shape
- Merges generated or imported keywords into stored projects

Each operation returns a Result. Taxonomy errors raised below this layer are
logged here and handed back as failures; they never escape to the caller.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional, TypeVar, Union

from .config import PipelineConfig
from .constants import COUNTRIES, DEFAULT_COUNTRY
from .document_normalizer import UploadedFile, normalize
from .errors import PipelineError, Result, ValidationError
from .generation_client import GenerationClient, create_generation_client
from .keyword_io import KeywordFileError, load_keyword_results
from .keyword_merge import merge_keywords, new_keywords
from .models import (
    BinaryInput,
    ContentAnalysis,
    ContentAnalysisRequest,
    KeywordProject,
    KeywordResult,
    NormalizedInput,
    SmartSEOAnalysis,
    StrategyPlan,
    TextInput,
)
from .prompts import build_analysis_prompt, build_keyword_prompt, build_strategy_prompt
from .result_adapter import to_legacy_analysis
from .schemas import Operation, schema_for
from .store import ProjectStore, create_project_store

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ContentIntelligencePipeline:
    """
    Entry point for keyword research, content analysis and strategy plans.

    The generation client and project store are constructed once and passed
    in; the pipeline holds no other state.
    """

    def __init__(
        self,
        client: Optional[GenerationClient],
        store: ProjectStore,
        config: Optional[PipelineConfig] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            client: Generation client used for every model call. If None, one
                is built from config on the first generation call.
            store: Accessor for the persisted user and projects.
            config: Token limits and provider settings. Defaults are used if None.
        """
        self.client = client
        self.store = store
        self.config = config or PipelineConfig()

    def _require_client(self) -> GenerationClient:
        """Return the generation client, building it on first use.

        Called only after a request has passed validation, so a missing API
        key never hides a validation failure.

        Raises:
            GenerationFailure: If no API key is configured.
        """
        if self.client is None:
            self.client = create_generation_client(self.config)
        return self.client

    def _guard(self, action: str, operation: Callable[[], T]) -> Result[T]:
        """Run one operation, converting taxonomy errors into a failed Result."""
        try:
            return Result.success(operation())
        except ValidationError as e:
            logger.warning(f"{action} rejected: {e.message}")
            return Result.failure(e)
        except PipelineError as e:
            logger.error(f"{action} failed: {e.message}")
            return Result.failure(e)

    # -------------------------------------------------------------------------
    # Keyword research
    # -------------------------------------------------------------------------

    def research_keywords(
        self,
        seed: str,
        country: str = DEFAULT_COUNTRY,
    ) -> Result[list[KeywordResult]]:
        """
        Generate keyword opportunities for a seed term in one market.

        Args:
            seed: Seed keyword.
            country: Target market, one of COUNTRIES.

        Returns:
            Result holding the generated KeywordResult list.
        """
        def run() -> list[KeywordResult]:
            seed_term = (seed or "").strip()
            if not seed_term or not country:
                raise ValidationError("Seed keyword and country are required")
            if country not in COUNTRIES:
                raise ValidationError(f"Unsupported country: '{country}'")

            data = self._require_client().generate(
                build_keyword_prompt(seed_term, country),
                schema=schema_for(Operation.KEYWORD_RESEARCH),
                profile="fast",
                max_tokens=self.config.keyword_max_tokens,
            )
            keywords = [KeywordResult.from_dict(item) for item in data]
            logger.info(f"Generated {len(keywords)} keywords for '{seed_term}' ({country})")
            return keywords

        return self._guard("Keyword research", run)

    # -------------------------------------------------------------------------
    # Content analysis
    # -------------------------------------------------------------------------

    def analyze_content(self, request: ContentAnalysisRequest) -> Result[SmartSEOAnalysis]:
        """
        Run the smart SEO analysis on pasted text or an inline document.

        Exactly one of ``request.text`` or ``request.base64`` must be set;
        ``base64`` also needs ``mime_type``. A request that breaks these rules
        fails before the backend is called.

        Args:
            request: The analysis request.

        Returns:
            Result holding the SmartSEOAnalysis.
        """
        def run() -> SmartSEOAnalysis:
            return self._analyze(_attachment_for(request), request)

        return self._guard("Content analysis", run)

    def analyze_document(
        self,
        source: Union[str, UploadedFile],
        content_type: str = "general",
        audience: str = "general",
        goal: str = "optimize",
    ) -> Result[SmartSEOAnalysis]:
        """
        Normalize text or an uploaded file, then run the smart analysis.

        Args:
            source: Pasted text or an uploaded file.
            content_type: Kind of content (blog post, product page, ...).
            audience: Target audience.
            goal: Primary goal of the page.

        Returns:
            Result holding the SmartSEOAnalysis. Unreadable files come back
            as an IngestionError failure.
        """
        def run() -> SmartSEOAnalysis:
            attachment = normalize(source)
            request = ContentAnalysisRequest(
                text=attachment.content if isinstance(attachment, TextInput) else None,
                base64=attachment.data if isinstance(attachment, BinaryInput) else None,
                mime_type=attachment.mime_type if isinstance(attachment, BinaryInput) else None,
                content_type=content_type,
                audience=audience,
                goal=goal,
            )
            return self._analyze(_attachment_for(request), request)

        return self._guard("Document analysis", run)

    def quick_analysis(self, content: str, target_keyword: str) -> Result[ContentAnalysis]:
        """
        Score content against one target keyword, in the legacy shape.

        Args:
            content: Text to analyze.
            target_keyword: Keyword the content should rank for.

        Returns:
            Result holding the ContentAnalysis.
        """
        def run() -> ContentAnalysis:
            if not (content or "").strip() or not (target_keyword or "").strip():
                raise ValidationError("Content and target keyword are required")

            request = ContentAnalysisRequest(
                text=content,
                content_type="general",
                audience="general",
                goal=f"Optimize for keyword: {target_keyword.strip()}",
            )
            rich = self._analyze(TextInput(content=content), request)
            return to_legacy_analysis(rich, content)

        return self._guard("Quick analysis", run)

    def _analyze(
        self,
        attachment: NormalizedInput,
        request: ContentAnalysisRequest,
    ) -> SmartSEOAnalysis:
        data = self._require_client().generate(
            build_analysis_prompt(request.content_type, request.audience, request.goal),
            attachment=attachment,
            schema=schema_for(Operation.SMART_ANALYSIS),
            profile="smart",
            max_tokens=self.config.analysis_max_tokens,
        )
        analysis = SmartSEOAnalysis.from_dict(data)
        logger.info(
            f"Content analysis complete: score={analysis.seo_score}, "
            f"issues={len(analysis.critical_issues)}"
        )
        return analysis

    # -------------------------------------------------------------------------
    # Strategy
    # -------------------------------------------------------------------------

    def generate_strategy(
        self,
        domain: str,
        business_type: str,
        goals: str,
    ) -> Result[StrategyPlan]:
        """
        Generate a 3-month SEO strategy as an HTML fragment.

        Args:
            domain: Client domain.
            business_type: Kind of business.
            goals: Primary goal.

        Returns:
            Result holding the StrategyPlan. An empty model response yields
            the placeholder fragment, not a failure.
        """
        def run() -> StrategyPlan:
            if not all((value or "").strip() for value in (domain, business_type, goals)):
                raise ValidationError("Domain, business type, and goals are required")

            text = self._require_client().generate(
                build_strategy_prompt(domain.strip(), business_type.strip(), goals.strip()),
                schema=schema_for(Operation.STRATEGY),
                profile="smart",
                max_tokens=self.config.strategy_max_tokens,
            )
            return StrategyPlan(strategy=text)

        return self._guard("Strategy generation", run)

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    def save_keywords(
        self,
        project_id: str,
        keywords: Iterable[KeywordResult],
    ) -> Result[KeywordProject]:
        """
        Merge keywords into a stored project and persist it.

        Existing entries win over incoming duplicates (same keyword text).

        Args:
            project_id: Id of an existing project.
            keywords: Keywords to add.

        Returns:
            Result holding the merged project.
        """
        def run() -> KeywordProject:
            project = self.store.get_project(project_id)
            if project is None:
                raise ValidationError(f"Project not found: '{project_id}'")

            incoming = list(keywords)
            added = new_keywords(project, incoming)
            merged = merge_keywords(project, incoming)
            self.store.save_project(merged)
            logger.info(
                f"Saved {len(added)} new keywords to project '{merged.name}' "
                f"({len(incoming) - len(added)} duplicates skipped)"
            )
            return merged

        return self._guard("Saving keywords", run)

    def import_keywords(
        self,
        project_id: str,
        file_path: Union[str, Path],
    ) -> Result[KeywordProject]:
        """
        Load keywords from a CSV/Excel file and merge them into a project.

        Args:
            project_id: Id of an existing project.
            file_path: Keyword file to import.

        Returns:
            Result holding the merged project. File problems come back as a
            ValidationError failure.
        """
        try:
            keywords = load_keyword_results(file_path)
        except KeywordFileError as e:
            logger.warning(f"Keyword import rejected: {e}")
            return Result.failure(ValidationError(str(e)))
        return self.save_keywords(project_id, keywords)


def _attachment_for(request: ContentAnalysisRequest) -> NormalizedInput:
    """
    Pick the content carried by an analysis request.

    Raises:
        ValidationError: If the request carries no content, both kinds of
            content, or base64 data without a media type.
    """
    has_text = request.text is not None and bool(request.text.strip())
    has_binary = bool(request.base64)

    if has_text and has_binary:
        raise ValidationError("Provide either text or file data, not both")
    if has_binary:
        if not request.mime_type:
            raise ValidationError("mimeType is required with file data")
        return BinaryInput(data=request.base64, mime_type=request.mime_type)  # type: ignore[arg-type]
    if has_text:
        return TextInput(content=request.text)  # type: ignore[arg-type]
    raise ValidationError("Text or file data is required")


def create_pipeline(config: Optional[PipelineConfig] = None) -> ContentIntelligencePipeline:
    """
    Factory function to create a pipeline backed by Anthropic and a file store.

    The Anthropic client is built lazily, so store-only use and request
    validation work without an API key.

    Args:
        config: Pipeline configuration. If None, read from the environment.

    Returns:
        Configured ContentIntelligencePipeline.
    """
    config = config or PipelineConfig.from_env()
    return ContentIntelligencePipeline(
        None,
        create_project_store(config),
        config,
    )
