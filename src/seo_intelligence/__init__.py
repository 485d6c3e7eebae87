"""
SEO Content Intelligence

A content intelligence pipeline for SEO work that:
- Generates ranked keyword ideas for a seed term and market
- Analyzes and rewrites pasted text or PDF/DOCX/TXT/MD documents
- Produces 3-month SEO strategy plans
- Keeps keyword projects in a local store
"""

__version__ = "1.0.0"
__author__ = "SEO Content Intelligence Team"

from .config import PipelineConfig

from .errors import (
    EmptyResponseError,
    GenerationFailure,
    IngestionError,
    MalformedOutputError,
    PipelineError,
    Result,
    StoreError,
    TransportFailure,
    ValidationError,
)

from .models import (
    BinaryInput,
    ContentAnalysis,
    ContentAnalysisRequest,
    KeywordProject,
    KeywordResult,
    SmartSEOAnalysis,
    StrategyPlan,
    TextInput,
    User,
)

from .document_normalizer import UploadedFile, normalize
from .generation_client import GenerationClient, create_generation_client
from .keyword_merge import merge_keywords
from .result_adapter import to_legacy_analysis
from .schemas import Operation, SchemaDescriptor, schema_for
from .store import FileStore, MemoryStore, ProjectStore

from .pipeline import ContentIntelligencePipeline, create_pipeline

__all__ = [
    "PipelineConfig",
    "PipelineError",
    "IngestionError",
    "ValidationError",
    "GenerationFailure",
    "EmptyResponseError",
    "MalformedOutputError",
    "StoreError",
    "TransportFailure",
    "Result",
    "TextInput",
    "BinaryInput",
    "User",
    "KeywordResult",
    "KeywordProject",
    "SmartSEOAnalysis",
    "ContentAnalysis",
    "ContentAnalysisRequest",
    "StrategyPlan",
    "UploadedFile",
    "normalize",
    "GenerationClient",
    "create_generation_client",
    "merge_keywords",
    "to_legacy_analysis",
    "Operation",
    "SchemaDescriptor",
    "schema_for",
    "FileStore",
    "MemoryStore",
    "ProjectStore",
    "ContentIntelligencePipeline",
    "create_pipeline",
]
