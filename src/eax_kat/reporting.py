"""Reporting functionality for harness runs.

Generates CSV, JSON, and Markdown reports from HarnessReports.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from tabulate import tabulate

from .corpus import KnownAnswerVector
from .interfaces import HarnessReport, Outcome

CSV_FIELDS = [
    "provider",
    "procedure",
    "tc_id",
    "comment",
    "outcome",
    "detail",
    "expected_hex",
    "produced_hex",
]


def _flat_rows(reports: list[HarnessReport]) -> list[dict[str, Any]]:
    rows = []
    for report in reports:
        for summary in report.summaries:
            for result in summary.results:
                row = result.to_dict()
                row["provider"] = report.provider
                rows.append(row)
    return rows


def export_to_csv(
    reports: list[HarnessReport],
    output_path: str | Path,
) -> Path:
    """Export per-vector results to CSV file.

    Args:
        reports: Reports from harness runs
        output_path: Path to output CSV file

    Returns:
        Path to written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in _flat_rows(reports):
            writer.writerow(row)

    return output_path


def export_to_json(
    reports: list[HarnessReport],
    output_path: str | Path,
    indent: int = 2,
) -> Path:
    """Export reports to JSON file.

    Args:
        reports: Reports from harness runs
        output_path: Path to output JSON file
        indent: JSON indentation level

    Returns:
        Path to written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "version": "1.0",
        "count": len(reports),
        "ok": all(r.ok for r in reports),
        "reports": [r.to_dict() for r in reports],
    }

    with open(output_path, "w") as f:
        json.dump(data, f, indent=indent, default=str)

    return output_path


def export_to_markdown(
    reports: list[HarnessReport],
    output_path: str | Path,
    title: str = "AES-EAX Conformance Report",
) -> Path:
    """Export reports to a Markdown document.

    Args:
        reports: Reports from harness runs
        output_path: Path to output Markdown file
        title: Report title

    Returns:
        Path to written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []

    lines.append(f"# {title}")
    lines.append("")
    lines.append(f"Providers evaluated: {len(reports)}")
    lines.append("")

    if not reports:
        lines.append("No results to report.")
        with open(output_path, "w") as f:
            f.write("\n".join(lines))
        return output_path

    lines.append("## Summary Table")
    lines.append("")

    headers = ["Provider", "Procedure", "Pass", "Skip", "Fail", "Verdict"]
    lines.append("| " + " | ".join(headers) + " |")
    lines.append("| " + " | ".join(["---"] * len(headers)) + " |")

    for report in reports:
        for s in report.summaries:
            row = [
                report.provider,
                s.procedure,
                str(s.passed),
                str(s.skipped),
                str(s.failed),
                "ok" if s.ok else "**FAIL**",
            ]
            lines.append("| " + " | ".join(row) + " |")

    lines.append("")

    # One section per provider with anything other than a pass
    for report in reports:
        noteworthy = [
            r for s in report.summaries for r in s.results
            if r.outcome is not Outcome.PASS
        ]
        if not noteworthy:
            continue
        lines.append(f"## {report.provider}")
        lines.append("")
        for r in noteworthy:
            lines.append(
                f"- `{r.procedure}` tc{r.tc_id} ({r.comment}): "
                f"**{r.outcome.value}** {r.detail}"
            )
        lines.append("")

    lines.append("## Notes")
    lines.append("")
    lines.append("- Every vector is evaluated with an explicitly requested 128-bit tag")
    lines.append("- A skip means the provider requires associated data before the message")
    lines.append("")

    with open(output_path, "w") as f:
        f.write("\n".join(lines))

    return output_path


def format_results_table(reports: list[HarnessReport]) -> str:
    """Format pass/skip/fail counts as a table string for CLI output."""
    if not reports:
        return "No results."

    headers = ["Provider", "Procedure", "Pass", "Skip", "Fail", "Verdict"]
    rows = [
        [
            report.provider,
            s.procedure,
            s.passed,
            s.skipped,
            s.failed,
            "ok" if s.ok else "FAIL",
        ]
        for report in reports
        for s in report.summaries
    ]
    return tabulate(rows, headers=headers, tablefmt="simple")


def format_vectors_table(corpus: tuple[KnownAnswerVector, ...]) -> str:
    """Format the corpus as a table string for CLI output."""
    headers = ["tc", "Key bits", "Nonce", "AAD", "Msg", "Comment"]
    rows = [
        [
            v.tc_id,
            len(v.key) * 8,
            len(v.nonce),
            len(v.associated_data),
            len(v.plaintext),
            v.comment,
        ]
        for v in corpus
    ]
    return tabulate(rows, headers=headers, tablefmt="simple")


def format_summary(report: HarnessReport) -> str:
    """Format a single provider's report for detailed output."""
    lines = [f"Provider: {report.provider}", ""]

    for s in report.summaries:
        lines.append(
            f"{s.procedure}: {s.passed} passed, {s.skipped} skipped, "
            f"{s.failed} failed (of {s.total})"
        )
        for r in s.failures():
            lines.append(f"  ! tc{r.tc_id} ({r.comment}): {r.detail}")

    lines.append("")
    lines.append(f"Verdict: {'PASS' if report.ok else 'FAIL'}")
    return "\n".join(lines)
