"""
Age-constrained version resolution.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from .errors import SafeNpmError
from .interfaces import CatalogSource
from .models import ResolutionOutcome, ResolutionRequest, VersionCatalog
from .ranges import normalize_range
from .semver_utils import highest_version, is_valid_version, satisfies
from .time_utils import ensure_utc


logger = logging.getLogger(__name__)


def range_candidates(catalog: VersionCatalog, effective_range: str) -> List[str]:
    """Versions of the catalog that satisfy an already normalized range."""
    return [
        ver for ver in catalog.versions
        if is_valid_version(ver) and satisfies(ver, effective_range)
    ]


def published_on_or_before(catalog: VersionCatalog, version: str, cutoff: datetime) -> bool:
    published = catalog.published_at.get(version)
    if published is None:
        return False
    return published <= cutoff


def select_version(
    catalog: VersionCatalog,
    raw_range: Optional[str],
    cutoff: datetime,
    bypass_age: bool = False,
) -> Optional[str]:
    """Pick the newest version allowed by both the range and the age policy.

    Args:
        catalog: Package metadata
        raw_range: Requested specifier; empty or None means latest
        cutoff: Newest acceptable publish time (inclusive)
        bypass_age: Skip the publish time check, keeping the range check

    Returns:
        Selected version, or None when no version qualifies

    Raises:
        UnsupportedRangeError: If the specifier is not a range or known tag
    """
    effective_range = normalize_range(raw_range, catalog.dist_tags)
    candidates = range_candidates(catalog, effective_range)
    logger.debug(
        "%s: %d of %d versions match %r",
        catalog.name, len(candidates), len(catalog.versions), effective_range,
    )

    if not bypass_age:
        cutoff = ensure_utc(cutoff)
        candidates = [ver for ver in candidates if published_on_or_before(catalog, ver, cutoff)]
        logger.debug("%s: %d candidates published by %s", catalog.name, len(candidates), cutoff)

    return highest_version(candidates)


class SafeVersionResolver:
    """Resolve requests against a catalog source, one outcome per request."""

    def __init__(self, source: CatalogSource) -> None:
        self.source = source

    def resolve(self, request: ResolutionRequest) -> ResolutionOutcome:
        logger.debug("Resolving %s@%s against %s", request.name, request.raw_range, request.registry)
        try:
            catalog = self.source.fetch_catalog(request.name)
            version = select_version(
                catalog,
                request.raw_range,
                request.cutoff,
                bypass_age=request.bypass_age,
            )
        except SafeNpmError as e:
            logger.info("Could not resolve %s@%s: %s", request.name, request.raw_range, e)
            return ResolutionOutcome.failed(request, str(e))

        if version is None:
            logger.info("No version of %s satisfies %r and the age policy", request.name, request.raw_range)
            return ResolutionOutcome.none_qualified(request)

        logger.info("Resolved %s@%s to %s", request.name, request.raw_range, version)
        return ResolutionOutcome.resolved(request, version)
