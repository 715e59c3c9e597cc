"""FastAPI + Tailwind interface for the reference extractor.

Run with:
    uvicorn reference_extractor.web:app --reload
"""
from __future__ import annotations

import logging
from dataclasses import asdict
from html import escape
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .config import ExtractorSettings
from .errors import EmptyInputError
from .extractor import ReferenceExtractor
from .report import render_report

logger = logging.getLogger(__name__)

app = FastAPI(title="Reference Extractor", description="Split references into bibliographic fields")


class ExtractRequest(BaseModel):
    references: List[str] = Field(..., min_length=1, description="Raw reference strings")


class ExtractResult(BaseModel):
    input: str
    fields: Optional[Dict[str, str]] = None
    entry: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class ExtractResponse(BaseModel):
    results: List[ExtractResult]


def get_extractor(request: Request) -> ReferenceExtractor:
    """Return the app-wide extractor, building it on first use."""

    extractor = getattr(request.app.state, "extractor", None)
    if extractor is None:
        load_dotenv()
        extractor = ReferenceExtractor.from_settings(ExtractorSettings.from_env())
        request.app.state.extractor = extractor
        logger.info("Reference extractor ready")
    return extractor


def _layout(content: str) -> str:
    """Wrap provided content in a Tailwind-powered HTML page."""

    return f"""
    <!doctype html>
    <html lang=\"en\" class=\"h-full bg-gray-50\">
    <head>
        <meta charset=\"utf-8\" />
        <title>Reference Extractor</title>
        <link href=\"https://cdn.jsdelivr.net/npm/tailwindcss@3.4.4/dist/tailwind.min.css\" rel=\"stylesheet\" />
    </head>
    <body class=\"min-h-full py-10\">
        <div class=\"max-w-5xl mx-auto px-4\">
            <div class=\"bg-white shadow rounded-lg p-6\">
                <h1 class=\"text-3xl font-semibold text-gray-900\">Reference Extractor</h1>
                <p class=\"text-gray-600 mt-2\">Paste references, one per line, to see the author, title, journal, date and other fields found in each.</p>
                {content}
            </div>
        </div>
    </body>
    </html>
    """


def _form_page(text: str = "", report: str | None = None) -> str:
    text_form = f"""
    <form action=\"/parse\" method=\"post\" class=\"bg-gray-50 border border-gray-200 rounded-lg p-4 mt-6\">
        <label class=\"block text-sm font-medium text-gray-700 mb-2\" for=\"text\">References</label>
        <textarea name=\"text\" required placeholder=\"Rakishev B.R. Automated Design of Blasting Operations...\" class=\"w-full h-44 border border-gray-300 rounded-md p-3 text-sm\">{escape(text)}</textarea>
        <button type=\"submit\" class=\"mt-4 inline-flex items-center px-4 py-2 bg-indigo-600 text-white rounded-md shadow hover:bg-indigo-700\">Extract Fields</button>
    </form>
    """

    report_block = ""
    if report:
        report_block = f"""
        <div class=\"mt-8\">
            <h2 class=\"text-xl font-semibold text-gray-800\">Extraction Report</h2>
            <pre class=\"mt-3 bg-gray-900 text-green-100 p-4 rounded-lg whitespace-pre-wrap text-sm\">{escape(report)}</pre>
        </div>
        """

    return _layout(text_form + report_block)


@app.get("/", response_class=HTMLResponse)
async def home() -> HTMLResponse:
    """Serve the reference submission form."""

    return HTMLResponse(_form_page())


@app.post("/parse", response_class=HTMLResponse)
def parse_text(request: Request, text: str = Form(...)) -> HTMLResponse:
    """Extract fields from pasted references and show the report."""

    extractor = get_extractor(request)
    lines = [line for line in text.splitlines() if line.strip()]
    records = extractor.extract_many(lines)
    return HTMLResponse(_form_page(text, render_report(records)))


@app.post("/api/extract", response_model=ExtractResponse, response_model_exclude_none=True)
def extract_references(payload: ExtractRequest, request: Request) -> ExtractResponse:
    """Return decoded fields and a cleaned entry for each reference."""

    extractor = get_extractor(request)
    results: List[ExtractResult] = []
    for reference in payload.references:
        try:
            record = extractor.extract(reference)
        except EmptyInputError as exc:
            results.append(ExtractResult(input=reference, error=str(exc)))
            continue
        entry = extractor.to_entry(record)
        results.append(ExtractResult(input=reference, fields=record.as_dict(), entry=asdict(entry)))
    return ExtractResponse(results=results)


def main() -> None:
    """Run the FastAPI app using uvicorn."""

    import uvicorn

    uvicorn.run("reference_extractor.web:app", host="0.0.0.0", port=8000, reload=False)


__all__ = ["app", "main"]
