from .relevance import smart_truncate, extract_relevant_content
from .trust_score import (
    determine_trust_level,
    build_evidence_summary,
    assemble_result,
    create_fallback_result,
)
from .response_parser import parse_verification_response
from .prompt_builder import VerificationPrompt, build_verification_prompt
from .llm import LanguageModel, GeminiClient
from .web_crawler import WebCrawler, FetchFailure
from .source_resolver import SourceResolver
from .retry_controller import VerificationRetryController
from .verification_service import IntegrityVerificationService

__all__ = [
    "smart_truncate",
    "extract_relevant_content",
    "determine_trust_level",
    "build_evidence_summary",
    "assemble_result",
    "create_fallback_result",
    "parse_verification_response",
    "VerificationPrompt",
    "build_verification_prompt",
    "LanguageModel",
    "GeminiClient",
    "WebCrawler",
    "FetchFailure",
    "SourceResolver",
    "VerificationRetryController",
    "IntegrityVerificationService",
]
