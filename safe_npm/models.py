"""
Core data models for safe version resolution.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional


@dataclass(frozen=True)
class VersionCatalog:
    """Registry metadata for one package, validated at the boundary."""

    name: str
    versions: FrozenSet[str] = frozenset()
    published_at: Dict[str, datetime] = field(default_factory=dict)
    dist_tags: Dict[str, str] = field(default_factory=dict)
    created: Optional[datetime] = None
    modified: Optional[datetime] = None


@dataclass(frozen=True)
class DependencySpec:
    """A dependency as requested on the command line or in package.json."""

    name: str
    range: str


@dataclass(frozen=True)
class ResolutionRequest:
    """One dependency to resolve against the age policy.

    ``registry`` records where the catalog source was pointed for this run;
    the source itself is chosen once per run from the settings.
    """

    name: str
    raw_range: Optional[str]
    registry: str
    cutoff: datetime
    bypass_age: bool = False


class OutcomeStatus(Enum):
    """Terminal states of a single resolution."""

    RESOLVED = "resolved"
    NO_QUALIFYING_VERSION = "no_qualifying_version"
    FAILED = "failed"


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of resolving one dependency."""

    name: str
    raw_range: Optional[str]
    status: OutcomeStatus
    version: Optional[str] = None
    error: Optional[str] = None
    bypass_age: bool = False

    @classmethod
    def resolved(cls, request: ResolutionRequest, version: str) -> "ResolutionOutcome":
        return cls(
            name=request.name,
            raw_range=request.raw_range,
            status=OutcomeStatus.RESOLVED,
            version=version,
            bypass_age=request.bypass_age,
        )

    @classmethod
    def none_qualified(cls, request: ResolutionRequest) -> "ResolutionOutcome":
        return cls(
            name=request.name,
            raw_range=request.raw_range,
            status=OutcomeStatus.NO_QUALIFYING_VERSION,
            bypass_age=request.bypass_age,
        )

    @classmethod
    def failed(cls, request: ResolutionRequest, error: str) -> "ResolutionOutcome":
        return cls(
            name=request.name,
            raw_range=request.raw_range,
            status=OutcomeStatus.FAILED,
            error=error,
            bypass_age=request.bypass_age,
        )

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.RESOLVED
