"""Synthetic report export."""

import re
from datetime import date, datetime
from typing import Optional

from .models import Report

# Static rows; the export does not reflect generated data
EXPORT_ROWS = (
    ("ECS", "$45,000", "25%"),
    ("RDS", "$28,000", "15%"),
    ("OBS", "$15,000", "8%"),
    ("Other", "$97,000", "52%"),
)


def render_report_csv(report: Report, generated_at: Optional[datetime] = None) -> str:
    """Render the fixed CSV template for a report."""
    generated_at = generated_at or datetime.utcnow()
    lines = [
        f"Report: {report.name}",
        f"Type: {report.type.value}",
        f"Generated: {generated_at.isoformat()}",
        "",
        '"Category","Amount","Percentage"',
    ]
    lines.extend(",".join(f'"{cell}"' for cell in row) for row in EXPORT_ROWS)
    return "\n".join(lines)


def report_filename(report: Report, day: Optional[date] = None) -> str:
    """Download name: whitespace runs in the report name become underscores."""
    day = day or date.today()
    stem = re.sub(r"\s+", "_", report.name)
    return f"{stem}_{day.isoformat()}.csv"
