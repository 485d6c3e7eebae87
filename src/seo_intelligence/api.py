"""
FastAPI relay for SEO Content Intelligence.

This module exposes the three generation operations over HTTP for a
browser front end, plus a health check. Every route is a thin shell over
ContentIntelligencePipeline.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .constants import DEFAULT_COUNTRY
from .errors import PipelineError, Result, ValidationError
from .models import ContentAnalysisRequest
from .pipeline import ContentIntelligencePipeline, create_pipeline

logger = logging.getLogger(__name__)

# Browser front ends served from any local dev port
LOCALHOST_ORIGIN_REGEX = r"^http://localhost:\d+$"


class KeywordResearchBody(BaseModel):
    """Keyword research request body."""
    seed: Optional[str] = None
    country: Optional[str] = DEFAULT_COUNTRY


class ContentAnalysisBody(BaseModel):
    """Smart content analysis request body. Send text or base64, not both."""
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    base64: Optional[str] = None
    mime_type: Optional[str] = Field(None, alias="mimeType")
    type: Optional[str] = Field("general", description="Content type, e.g. 'Blog Post'")
    audience: Optional[str] = "general"
    goal: Optional[str] = "optimize"


class StrategyBody(BaseModel):
    """Strategy request body."""
    model_config = ConfigDict(populate_by_name=True)

    domain: Optional[str] = None
    business_type: Optional[str] = Field(None, alias="businessType")
    goals: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    model_config = ConfigDict(populate_by_name=True)

    status: str
    timestamp: str
    api_key_configured: bool = Field(alias="apiKeyConfigured")


def _error_response(error: PipelineError, failure_message: str) -> JSONResponse:
    """Map a pipeline failure to the relay's JSON error body."""
    if isinstance(error, ValidationError):
        return JSONResponse(status_code=400, content={"error": error.message})
    return JSONResponse(
        status_code=500,
        content={"error": failure_message, "message": error.message},
    )


def create_app(pipeline: Optional[ContentIntelligencePipeline] = None) -> FastAPI:
    """
    Build the relay application.

    Args:
        pipeline: Pipeline serving the routes. If None, one is built from
            environment configuration on the first request that needs it.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="SEO Content Intelligence API",
        description="Keyword research, smart content analysis and SEO strategy generation",
        version="1.0.0",
    )
    app.state.pipeline = pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=LOCALHOST_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def run(
        request: Request,
        failure_message: str,
        operation: Callable[[ContentIntelligencePipeline], Result],
        serialize: Callable[[Any], Any],
    ):
        current = request.app.state.pipeline
        if current is None:
            current = create_pipeline()
            request.app.state.pipeline = current

        result = operation(current)
        if not result.ok:
            return _error_response(result.error, failure_message)
        return serialize(result.value)

    @app.post("/api/ai/keyword-research")
    def keyword_research(body: KeywordResearchBody, request: Request):
        """Generate keyword opportunities for a seed term."""
        logger.info(f"Keyword research for: {body.seed} in {body.country}")
        return run(
            request,
            "Failed to generate keywords",
            lambda p: p.research_keywords(body.seed or "", body.country or ""),
            lambda keywords: [kw.to_dict() for kw in keywords],
        )

    @app.post("/api/ai/content-analysis")
    def content_analysis(body: ContentAnalysisBody, request: Request):
        """Run the smart SEO analysis on text or an inline document."""
        analysis_request = ContentAnalysisRequest(
            text=body.text,
            base64=body.base64,
            mime_type=body.mime_type,
            content_type=body.type or "general",
            audience=body.audience or "general",
            goal=body.goal or "optimize",
        )
        return run(
            request,
            "Failed to analyze content",
            lambda p: p.analyze_content(analysis_request),
            lambda analysis: analysis.to_dict(),
        )

    @app.post("/api/ai/strategy")
    def strategy(body: StrategyBody, request: Request):
        """Generate a 3-month SEO strategy as HTML."""
        return run(
            request,
            "Failed to generate strategy",
            lambda p: p.generate_strategy(body.domain or "", body.business_type or "", body.goals or ""),
            lambda plan: plan.to_dict(),
        )

    @app.get("/health", response_model=HealthResponse, response_model_by_alias=True)
    def health(request: Request):
        """Health check endpoint."""
        current = request.app.state.pipeline
        if current is not None:
            configured = current.config.has_api_key
        else:
            configured = bool(os.environ.get("ANTHROPIC_API_KEY"))
        return HealthResponse(
            status="ok",
            timestamp=datetime.now(timezone.utc).isoformat(),
            api_key_configured=configured,
        )

    return app


app = create_app()
