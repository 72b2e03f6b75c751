"""Prompt construction for race commentary."""

from __future__ import annotations

from splits_analysis.model.times import format_time
from splits_analysis.model.util import is_not_null_nor_nan
from splits_analysis.reporting.models import ClassReport, ResultLine

# ---------------------------------------------------------------------------
# Prompt templates
# ---------------------------------------------------------------------------

_SYSTEM_PROMPT = """You are an experienced orienteering coach reviewing split times.

Rules (follow strictly):
1. Base every statement only on the results data given; never invent times, controls or names.
2. Output exactly the JSON format requested and nothing else.
3. Each highlight must point at a specific result and control from the data.
4. The severity field may only be 'high', 'medium' or 'low'."""

_USER_TEMPLATE = """Results for {title} ({num_controls} controls):

{results_text}

Time losses are seconds lost at each control against the fastest splits, scaled to the runner's own pace.

Reply with exactly this JSON and nothing else:
{{
  "summary": "1-2 sentences on how the class was won",
  "highlights": [
    {{"result_name": "<name>", "control_index": <integer>, "severity": "high|medium|low", "text": "<observation>"}}
  ]
}}"""

_MAX_RESULTS_IN_PROMPT = 10


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _format_line(line: ResultLine) -> str:
    position = line.status or str(line.position)
    text = f"[{position}] {line.name}: total {format_time(line.total_time)}"
    losses = [
        f"{index}:{cell.time_loss:+.0f}s"
        for index, cell in enumerate(line.controls, 1)
        if is_not_null_nor_nan(cell.time_loss) and cell.time_loss > 0
    ]
    if losses:
        text += "\n  losses " + ", ".join(losses)
    return text


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def estimate_tokens(text: str) -> int:
    """Return a rough token count estimate for *text* (four characters per token)."""
    return len(text) // 4


class PromptBuilder:
    """Build LLM prompts from a :class:`~splits_analysis.reporting.models.ClassReport`."""

    @property
    def system_prompt(self) -> str:
        return _SYSTEM_PROMPT

    def build(self, report: ClassReport) -> str:
        """Build the user-turn prompt from the leading results of *report*."""
        results_text = "\n".join(_format_line(r) for r in report.results[:_MAX_RESULTS_IN_PROMPT])
        return _USER_TEMPLATE.format(
            title=report.title,
            num_controls=report.num_controls,
            results_text=results_text,
        )

    def build_messages(self, report: ClassReport) -> tuple[str, str]:
        """Return ``(system_prompt, user_prompt)`` ready for the chat API."""
        return self.system_prompt, self.build(report)
