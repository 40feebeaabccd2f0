"""
Reporting and export utilities.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Sequence

import pandas as pd

from .models import OutcomeStatus, ResolutionOutcome


logger = logging.getLogger(__name__)

NO_QUALIFYING_REASON = "No version satisfies the range and age requirement"

REPORT_COLUMNS = ["name", "range", "status", "version", "bypass_age", "error"]


def failure_reason(outcome: ResolutionOutcome) -> str:
    if outcome.status is OutcomeStatus.NO_QUALIFYING_VERSION:
        return NO_QUALIFYING_REASON
    return f"error: {outcome.error or 'Unknown error'}"


def format_failures(outcomes: Iterable[ResolutionOutcome]) -> List[str]:
    lines = []
    for outcome in outcomes:
        if outcome.ok:
            continue
        lines.append(f"  - {outcome.name}@{outcome.raw_range}: {failure_reason(outcome)}")
    return lines


def format_resolved(outcomes: Iterable[ResolutionOutcome]) -> List[str]:
    lines = []
    for outcome in outcomes:
        if not outcome.ok:
            continue
        ignored_label = " (ignored)" if outcome.bypass_age else ""
        lines.append(f"  {outcome.name}@{outcome.version}{ignored_label}")
    return lines


def outcomes_to_frame(outcomes: Sequence[ResolutionOutcome]) -> pd.DataFrame:
    rows = [
        {
            "name": outcome.name,
            "range": outcome.raw_range,
            "status": outcome.status.value,
            "version": outcome.version,
            "bypass_age": outcome.bypass_age,
            "error": outcome.error,
        }
        for outcome in outcomes
    ]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def save_report(outcomes: Sequence[ResolutionOutcome], path: Path) -> Path:
    """Write outcomes as CSV, or as JSON records when the suffix is .json."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = outcomes_to_frame(outcomes)
    if path.suffix.lower() == ".json":
        df.to_json(path, orient="records", indent=2)
    else:
        df.to_csv(path, index=False)
    logger.info("Saved report with %d rows to %s", len(df), path)
    return path
