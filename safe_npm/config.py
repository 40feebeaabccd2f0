"""
Run configuration assembled from command-line options and the environment.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import FrozenSet, Mapping, Optional

from .registry import DEFAULT_REGISTRY, REQUEST_TIMEOUT
from .time_utils import compute_cutoff


DEFAULT_MIN_AGE_DAYS = 90
DEFAULT_JOBS = 4

FIXTURES_ENV = "SAFE_NPM_FIXTURES"
REGISTRY_ENV = "SAFE_NPM_REGISTRY"

MIN_AGE_MESSAGE = "--min-age-days must be a non-negative number"


def parse_ignore_list(value: Optional[str]) -> FrozenSet[str]:
    """Split a comma-separated package list, dropping blanks."""
    if not value:
        return frozenset()
    return frozenset(token.strip() for token in value.split(",") if token.strip())


@dataclass(frozen=True)
class Settings:
    """Settings fixed before any resolution starts."""

    registry: str
    min_age_days: float
    cutoff: datetime
    ignore: FrozenSet[str] = frozenset()
    strict: bool = False
    dry_run: bool = False
    dev_only: bool = False
    prod_only: bool = False
    strategy: str = "direct"
    timeout: float = REQUEST_TIMEOUT
    jobs: int = DEFAULT_JOBS
    fixtures: Optional[Path] = None
    report: Optional[Path] = None
    show_progress: bool = False
    cwd: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_options(
        cls,
        options,
        env: Optional[Mapping[str, str]] = None,
        now: Optional[datetime] = None,
    ) -> "Settings":
        """Build settings from parsed argparse options.

        Raises:
            ValueError: If the options are inconsistent or out of range
        """
        env = os.environ if env is None else env

        try:
            min_age_days = float(options.min_age_days)
        except (TypeError, ValueError):
            raise ValueError(MIN_AGE_MESSAGE) from None
        if not math.isfinite(min_age_days) or min_age_days < 0:
            raise ValueError(MIN_AGE_MESSAGE)
        if options.dev and options.prod_only:
            raise ValueError("--dev and --prod-only cannot be used together.")
        if options.timeout <= 0:
            raise ValueError("--timeout must be a positive number")

        try:
            cutoff = compute_cutoff(min_age_days, now)
        except OverflowError:
            raise ValueError(f"--min-age-days is too large: {options.min_age_days}") from None

        registry = options.registry or env.get(REGISTRY_ENV) or DEFAULT_REGISTRY
        fixtures = env.get(FIXTURES_ENV)

        return cls(
            registry=registry,
            min_age_days=min_age_days,
            cutoff=cutoff,
            ignore=parse_ignore_list(options.ignore),
            strict=options.strict,
            dry_run=options.dry_run,
            dev_only=options.dev,
            prod_only=options.prod_only,
            strategy=(options.strategy or "direct").lower(),
            timeout=options.timeout,
            jobs=max(1, options.jobs),
            fixtures=Path(fixtures) if fixtures else None,
            report=Path(options.report) if options.report else None,
            show_progress=options.progress,
        )
