"""
Error types raised while resolving dependencies.
"""

from __future__ import annotations

from typing import Optional


class SafeNpmError(Exception):
    """Base class for safe-npm errors."""


class UnsupportedRangeError(SafeNpmError, ValueError):
    """The requested range is neither a semver range nor a known dist-tag."""

    def __init__(self, raw_range: Optional[str]) -> None:
        self.raw_range = raw_range
        super().__init__(f"Unsupported version range: {raw_range}")


class RegistryFetchError(SafeNpmError):
    """Package metadata could not be retrieved from the registry."""

    def __init__(self, name: str, cause: str) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Failed to fetch metadata for {name}: {cause}")


class InvalidCatalogError(SafeNpmError):
    """The registry returned a document that is not a usable packument."""

    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Invalid registry response for {name}: {detail}")


class ManifestError(SafeNpmError):
    """package.json or a package spec could not be used."""
