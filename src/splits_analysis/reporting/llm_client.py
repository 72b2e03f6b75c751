"""OpenAI-compatible commentary client.

Reads its settings from the ``SPLITS_LLM_API_KEY``, ``SPLITS_LLM_BASE_URL``
and ``SPLITS_LLM_MODEL`` environment variables by default.  Pass them
explicitly in tests or when integrating with secret managers.  Without an
API key no request is made and commentary is rule-based.
"""

from __future__ import annotations

import json
import logging
import os

from openai import APIError, OpenAI, OpenAIError

from splits_analysis.model.times import format_time
from splits_analysis.model.util import is_not_null_nor_nan
from splits_analysis.reporting.models import ClassReport, Highlight
from splits_analysis.reporting.prompt import PromptBuilder

_logger = logging.getLogger(__name__)

_SEVERITY_LEVELS = frozenset({"high", "medium", "low"})

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"

_HIGH_LOSS_SECONDS = 60
"""A time loss at one control at least this large is a major mistake."""

# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def parse_llm_response(raw: str) -> tuple[str, list[Highlight]]:
    """Parse a JSON LLM response into ``(summary, highlights)``.

    Returns ``("", [])`` on any parse or structure error.
    """
    try:
        data = json.loads(raw)
        summary = str(data.get("summary", ""))
        highlights: list[Highlight] = []
        for item in data.get("highlights", []):
            severity = item.get("severity", "medium")
            if severity not in _SEVERITY_LEVELS:
                severity = "medium"
            highlights.append(
                Highlight(
                    result_name=str(item["result_name"]),
                    control_index=int(item["control_index"]),
                    severity=severity,
                    text=str(item["text"]),
                )
            )
        return summary, highlights
    except (json.JSONDecodeError, KeyError, ValueError, TypeError, AttributeError):
        return "", []


def fallback_commentary(report: ClassReport) -> tuple[str, list[Highlight]]:
    """Generate rule-based commentary when the LLM API is unavailable.

    The summary names the winner and the winning margin; there is one
    highlight per result for its biggest positive time loss.
    """
    placed = [line for line in report.results if line.position is not None and line.total_time is not None]
    if not placed:
        return f"No competitor completed {report.title}.", []

    winner = placed[0]
    summary = f"{winner.name} won {report.title} in {format_time(winner.total_time)}"
    if len(placed) > 1:
        margin = placed[1].total_time - winner.total_time
        summary += f", {format_time(margin)} ahead of {placed[1].name}"
    summary += "."

    highlights: list[Highlight] = []
    for line in report.results:
        losses = [
            (cell.time_loss, index)
            for index, cell in enumerate(line.controls, 1)
            if is_not_null_nor_nan(cell.time_loss) and cell.time_loss > 0
        ]
        if not losses:
            continue
        loss, control_index = max(losses)
        severity = "high" if loss >= _HIGH_LOSS_SECONDS else "medium" if loss >= _HIGH_LOSS_SECONDS / 2 else "low"
        highlights.append(
            Highlight(
                result_name=line.name,
                control_index=control_index,
                severity=severity,
                text=f"Lost about {format_time(loss)} at control {control_index}.",
            )
        )

    highlights.sort(key=lambda h: ("high", "medium", "low").index(h.severity))
    return summary, highlights


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class CommentaryClient:
    """Chat completion client for race commentary.

    Args:
        api_key: API key; falls back to ``SPLITS_LLM_API_KEY``.
        base_url: Endpoint; falls back to ``SPLITS_LLM_BASE_URL``.
        model: Model identifier; falls back to ``SPLITS_LLM_MODEL``.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        key = api_key or os.environ.get("SPLITS_LLM_API_KEY", "")
        url = base_url or os.environ.get("SPLITS_LLM_BASE_URL", DEFAULT_BASE_URL)
        self._model = model or os.environ.get("SPLITS_LLM_MODEL", DEFAULT_MODEL)
        self._client = OpenAI(api_key=key, base_url=url, timeout=timeout) if key else None

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def generate(self, system_prompt: str, user_prompt: str) -> tuple[str, dict]:
        """Call the LLM API and return ``(response_text, usage_dict)``.

        Returns ``("", {})`` when disabled, on timeout or on any API error.
        API token usage is logged at ``INFO`` level.
        """
        if self._client is None:
            return "", {}

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }
            _logger.info(
                "LLM API usage: prompt %d, completion %d, total %d tokens",
                usage["prompt_tokens"],
                usage["completion_tokens"],
                usage["total_tokens"],
            )
            return response.choices[0].message.content, usage
        except (OpenAIError, APIError) as exc:
            _logger.warning("LLM API call failed: %s", exc)
            return "", {}

    def analyze(self, report: ClassReport, builder: PromptBuilder | None = None) -> ClassReport:
        """Generate commentary and apply it to *report* (mutates and returns it).

        Falls back to rule-based commentary when the API is unavailable or
        its reply cannot be parsed.
        """
        if builder is None:
            builder = PromptBuilder()

        system_prompt, user_prompt = builder.build_messages(report)
        raw_text, _ = self.generate(system_prompt, user_prompt)

        if raw_text:
            summary, highlights = parse_llm_response(raw_text)
            if summary or highlights:
                known_names = {line.name for line in report.results}
                report.summary = summary
                report.highlights = [h for h in highlights if h.result_name in known_names]
                return report

        summary, highlights = fallback_commentary(report)
        report.summary = summary
        report.highlights = highlights
        return report
