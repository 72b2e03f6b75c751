"""Markdown results-table formatter."""

from __future__ import annotations

from pathlib import Path

from splits_analysis.model.times import format_time
from splits_analysis.reporting.models import ClassReport, ControlCell, ResultLine

_SEVERITY_LABEL: dict[str, str] = {
    "high": "major",
    "medium": "notable",
    "low": "minor",
}


def _format_cell(cell: ControlCell) -> str:
    cum = format_time(cell.cum_time)
    split = format_time(cell.split_time)
    text = f"{cum} ({split})"
    if cell.dubious:
        text += " *"
    return text


def _format_row(line: ResultLine) -> str:
    position = line.status if line.status else str(line.position or "")
    total = format_time(line.total_time) if line.total_time is not None else line.status or "mp"
    name = f"{line.name}, {line.club}" if line.club else line.name
    cells = [position, name, total] + [_format_cell(c) for c in line.controls]
    return "| " + " | ".join(cells) + " |"


def _header(report: ClassReport) -> list[str]:
    columns = ["#", "Name", "Time"]
    for control in range(1, report.num_controls + 1):
        if len(report.control_codes) == report.num_controls:
            columns.append(f"{control} ({report.control_codes[control - 1]})")
        else:
            columns.append(str(control))
    columns.append("Finish")
    return ["| " + " | ".join(columns) + " |", "|" + "|".join("---" for _ in columns) + "|"]


class MarkdownFormatter:
    """Format a :class:`~splits_analysis.reporting.models.ClassReport` as Markdown."""

    def format(self, report: ClassReport) -> str:
        """Return the full Markdown report as a string."""
        plural = "" if report.num_controls == 1 else "s"
        lines: list[str] = [
            f"# Results: {report.title}",
            "",
        ]
        if report.course_name:
            lines.append(f"**Course**: {report.course_name}  ")
        lines += [f"**Controls**: {report.num_controls} control{plural}  "]
        if report.winner_name:
            lines.append(f"**Winner**: {report.winner_name}  ")
        lines.append("")

        if report.summary:
            lines += ["## Summary", "", report.summary, ""]

        lines += ["## Results", ""]
        lines += _header(report)
        for line in report.results:
            lines.append(_format_row(line))
        lines.append("")
        if any(cell.dubious for line in report.results for cell in line.controls):
            lines += ["\\* time removed as dubious by data repair", ""]

        if report.highlights:
            lines += ["## Highlights", ""]
            for i, h in enumerate(report.highlights, 1):
                label = _SEVERITY_LABEL.get(h.severity, h.severity)
                lines.append(f"{i}. **{h.result_name}** at control {h.control_index} [{label}]: {h.text}")
            lines.append("")

        return "\n".join(lines)

    def write(self, report: ClassReport, path: str) -> None:
        """Write the formatted report to *path* (UTF-8)."""
        Path(path).write_text(self.format(report), encoding="utf-8")
