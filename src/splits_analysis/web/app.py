"""FastAPI Web application."""

from __future__ import annotations

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from splits_analysis.web.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    ChartRequest,
    ChartResponse,
    HealthResponse,
    HighlightModel,
    ReportRequest,
    ReportResponse,
)
from splits_analysis.web.service import AnalysisService

load_dotenv()  # loads .env from project root; must run before env vars are consumed

VERSION = "0.1.0"

app = FastAPI(title="Splits Analysis", version=VERSION)


def _run(call, req):
    try:
        return call(req)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.post("/api/analyze", response_model=AnalyzeResponse)
def analyze(req: AnalyzeRequest) -> AnalyzeResponse:
    """Repair the event, then return reference times, ranks and time losses per class."""
    data = _run(AnalysisService().analyze, req)
    return AnalyzeResponse(**data)


@app.post("/api/chart", response_model=ChartResponse)
def chart(req: ChartRequest) -> ChartResponse:
    """Return the data for one chart of the selected classes."""
    data = _run(AnalysisService().chart, req)
    return ChartResponse(**data)


@app.post("/api/report", response_model=ReportResponse)
def report(req: ReportRequest) -> ReportResponse:
    """Return the Markdown results table and commentary for the selected classes."""
    class_report, markdown = _run(AnalysisService().report, req)
    return ReportResponse(
        title=class_report.title,
        markdown=markdown,
        summary=class_report.summary,
        highlights=[
            HighlightModel(
                result_name=h.result_name,
                control_index=h.control_index,
                severity=h.severity,
                text=h.text,
            )
            for h in class_report.highlights
        ],
    )
