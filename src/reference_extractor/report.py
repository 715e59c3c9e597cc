"""Plain-text reports for extraction and evaluation results."""
from __future__ import annotations

from typing import Optional, Sequence

from .evaluation import EvaluationReport
from .models import DecodedReference


def render_report(records: Sequence[Optional[DecodedReference]]) -> str:
    """Return a human-readable listing of each reference and its fields."""

    parsed = sum(1 for record in records if record is not None)
    lines = ["Reference Extraction Report", f"References parsed: {parsed} of {len(records)}"]
    for idx, record in enumerate(records, start=1):
        lines.append("")
        if record is None:
            lines.append(f"[{idx}] (skipped: empty reference)")
            continue
        lines.append(f"[{idx}] {record.raw_text.strip()}")
        if not record:
            lines.append("    (no fields)")
        width = max((len(name) for name in record), default=0)
        for name, value in record.items():
            lines.append(f"    {name.ljust(width)} : {value}")
    return "\n".join(lines)


def render_evaluation(report: EvaluationReport) -> str:
    lines = [
        "Model Evaluation Report",
        f"Examples: {report.examples}",
        f"Tokens: {report.tokens}",
        f"Token accuracy: {report.token_accuracy:.2%}",
        f"Exact matches: {report.exact_matches}",
    ]
    summary = report.to_dict()["fields"]
    if summary:
        lines.append("Fields:")
        for name, scores in summary.items():
            lines.append(
                f"  {name:<10} precision={scores['precision']:.2f} "
                f"recall={scores['recall']:.2f} f1={scores['f1']:.2f}"
            )
    return "\n".join(lines)
