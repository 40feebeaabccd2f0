"""
Interfaces for metadata sources and installers.
"""

from __future__ import annotations

from typing import Mapping, Protocol

from .models import VersionCatalog


class CatalogSource(Protocol):
    """Provide the version catalog of a package."""

    def fetch_catalog(self, name: str) -> VersionCatalog:
        ...


class Installer(Protocol):
    """Install resolved versions and report the process exit code."""

    def install(self, resolved: Mapping[str, str]) -> int:
        ...
