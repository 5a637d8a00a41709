from .cv_context import DocumentContext, LineEntry, build_document_context
from .extraction_quality import analyze_extraction_quality, extraction_level
from .keyword_coverage import compute_keyword_coverage

__all__ = [
    "DocumentContext",
    "LineEntry",
    "analyze_extraction_quality",
    "build_document_context",
    "compute_keyword_coverage",
    "extraction_level",
]
