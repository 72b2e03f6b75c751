"""Class reports, Markdown output and race commentary."""

from splits_analysis.reporting.aggregator import ClassReportAggregator
from splits_analysis.reporting.formatter import MarkdownFormatter
from splits_analysis.reporting.llm_client import (
    CommentaryClient,
    fallback_commentary,
    parse_llm_response,
)
from splits_analysis.reporting.models import ClassReport, ControlCell, Highlight, ResultLine
from splits_analysis.reporting.prompt import PromptBuilder, estimate_tokens

__all__ = [
    "ClassReport",
    "ClassReportAggregator",
    "CommentaryClient",
    "ControlCell",
    "Highlight",
    "MarkdownFormatter",
    "PromptBuilder",
    "ResultLine",
    "estimate_tokens",
    "fallback_commentary",
    "parse_llm_response",
]
