"""
Pytest fixtures and configuration for SEO Content Intelligence tests.
"""

import json
from pathlib import Path
from typing import Optional

import pytest
from docx import Document

from seo_intelligence.config import PipelineConfig
from seo_intelligence.generation_client import GenerationClient
from seo_intelligence.models import GenerationRequest, KeywordProject, KeywordResult
from seo_intelligence.pipeline import ContentIntelligencePipeline
from seo_intelligence.store import MemoryStore, ProjectStore


class FakeBackend:
    """Generation backend that records requests and replays canned text."""

    def __init__(self, response: Optional[str] = None):
        self.response = response
        self.requests: list[GenerationRequest] = []

    def send(self, request: GenerationRequest) -> Optional[str]:
        self.requests.append(request)
        return self.response


def make_keyword(
    keyword: str,
    volume: str = "1k-10k",
    difficulty: int = 40,
    intent: str = "Informational",
    competition: str = "Medium",
) -> KeywordResult:
    """Build a KeywordResult with sensible defaults."""
    return KeywordResult(
        keyword=keyword,
        volume=volume,
        difficulty=difficulty,
        intent=intent,  # type: ignore[arg-type]
        competition=competition,  # type: ignore[arg-type]
    )


@pytest.fixture
def smart_analysis_payload() -> dict:
    """A schema-conformant smart analysis response."""
    return {
        "seoScore": 72,
        "optimizedContent": "# Running Shoes Guide\n\nPick shoes that fit your stride.",
        "meta": {
            "title": "Running Shoes Guide: How to Choose",
            "description": "Learn how to choose running shoes. Read the guide today.",
            "slug": "running-shoes-guide",
        },
        "schemaMarkup": '{"@context": "https://schema.org", "@type": "Article"}',
        "internalLinks": [
            {"anchor": "marathon training", "context": "After the second paragraph"},
        ],
        "insights": ["Added an H1 that matches search intent"],
        "criticalIssues": ["Missing H1", "No meta description"],
    }


@pytest.fixture
def keyword_payload() -> list[dict]:
    """A schema-conformant keyword research response."""
    return [
        {
            "keyword": "best running shoes",
            "volume": "10k-100k",
            "difficulty": 68,
            "intent": "Commercial",
            "competition": "High",
        },
        {
            "keyword": "running shoes for flat feet",
            "volume": "1k-10k",
            "difficulty": 35,
            "intent": "Commercial",
            "competition": "Medium",
        },
        {
            "keyword": "how to lace running shoes",
            "volume": "100-1k",
            "difficulty": 12,
            "intent": "Informational",
            "competition": "Low",
        },
    ]


@pytest.fixture
def fake_backend() -> FakeBackend:
    """A backend with no canned response; tests set ``response``."""
    return FakeBackend()


@pytest.fixture
def project_store() -> ProjectStore:
    """Project store over an in-memory key-value store."""
    return ProjectStore(MemoryStore(), app_prefix="test_app")


@pytest.fixture
def sample_project(project_store: ProjectStore) -> KeywordProject:
    """A stored project holding one keyword."""
    project = project_store.create_project("Running Blog", "runfast.example")
    project = KeywordProject(
        id=project.id,
        name=project.name,
        domain=project.domain,
        keywords=[make_keyword("seo tips", volume="1k-10k", difficulty=30)],
        created_at=project.created_at,
    )
    project_store.save_project(project)
    return project


@pytest.fixture
def pipeline(fake_backend: FakeBackend, project_store: ProjectStore) -> ContentIntelligencePipeline:
    """Pipeline wired to the fake backend and the in-memory store."""
    return ContentIntelligencePipeline(
        GenerationClient(fake_backend),
        project_store,
        PipelineConfig(api_key="test-key"),
    )


@pytest.fixture
def sample_docx(tmp_path: Path) -> Path:
    """Create a sample Word document with a heading, paragraphs and a table."""
    docx_path = tmp_path / "sample.docx"
    doc = Document()

    doc.add_heading("Running Shoes Guide", level=1)
    doc.add_paragraph("Choosing the right running shoes matters.")
    doc.add_paragraph("")

    table = doc.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Brand"
    table.cell(0, 1).text = "Price"
    table.cell(1, 0).text = "Acme"
    table.cell(1, 1).text = "$120"

    doc.add_paragraph("Replace them every 500 miles.")

    doc.save(str(docx_path))
    return docx_path


@pytest.fixture
def sample_keywords_csv(tmp_path: Path) -> Path:
    """Create a keyword results CSV file."""
    csv_path = tmp_path / "keywords.csv"
    csv_content = """keyword,search_volume,kd,intent,competition
best running shoes,10k-100k,68,commercial,HIGH
trail running shoes,1k-10k,42,Commercial,medium
how to lace running shoes,100-1k,12,info,low
"""
    csv_path.write_text(csv_content, encoding="utf-8")
    return csv_path


def as_json(value) -> str:
    """Serialize a payload the way a backend would return it."""
    return json.dumps(value)
