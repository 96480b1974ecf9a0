from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence


@dataclass(frozen=True)
class SpreadsheetReport:
    """Tabular report handed to the xlsx exporter."""

    title: str
    subtitles: Sequence[str]
    column_headers: Sequence[str]
    rows: Sequence[Sequence[Any]] = field(default_factory=list)
    filename: str = "report.xlsx"
