"""
npm-flavoured semver helpers built on semantic_version.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, Optional, Tuple

import semantic_version


logger = logging.getLogger(__name__)

_LEADING_NOISE = re.compile(r"^[=v\s]+")
# npm tolerates whitespace between an operator and its version (">= 1.2.3").
_OPERATOR_GAP = re.compile(r"(<=|>=|<|>|=|\^|~)\s+")
# "1.2.3-" and "1.2.3+" carry an empty prerelease or build suffix.
_EMPTY_SUFFIX = re.compile(r"(?<=[0-9A-Za-z.])[-+](?=\s|$)")
_PRERELEASE_COMPARATOR = re.compile(r"(?<![0-9A-Za-z.])v?(\d+)\.(\d+)\.(\d+)-[0-9A-Za-z.-]+")


def parse_version(value: str) -> Optional[semantic_version.Version]:
    """Parse a version the way npm's ``semver.valid`` does, or return None."""
    if not isinstance(value, str):
        return None
    cleaned = _LEADING_NOISE.sub("", value.strip())
    if not cleaned:
        return None
    try:
        return semantic_version.Version(cleaned)
    except ValueError:
        return None


def is_valid_version(value: str) -> bool:
    return parse_version(value) is not None


def npm_semver_key(value: str) -> Optional[Tuple]:
    """Sort key following semver precedence; build metadata is ignored."""
    parsed = parse_version(value)
    if parsed is None:
        return None
    return parsed.truncate("prerelease").precedence_key


def _canonical_range(expression: str) -> str:
    return _OPERATOR_GAP.sub(r"\1", " ".join(expression.split()))


@lru_cache(maxsize=256)
def compile_range(expression: str) -> Optional[semantic_version.NpmSpec]:
    """Compile an npm range expression, returning None when it is not one."""
    if not isinstance(expression, str):
        return None
    canonical = _canonical_range(expression)
    if _EMPTY_SUFFIX.search(canonical):
        return None
    try:
        return semantic_version.NpmSpec(canonical)
    except (ValueError, AttributeError):
        # semantic_version trips over some malformed hyphen ranges ("^1 - ^2").
        return None


def is_valid_range(expression: str) -> bool:
    return compile_range(expression) is not None


def _admits_prerelease(clause: str, version: semantic_version.Version) -> bool:
    target = (version.major, version.minor, version.patch)
    for match in _PRERELEASE_COMPARATOR.finditer(clause):
        if tuple(int(part) for part in match.groups()) == target:
            return True
    return False


def satisfies(version: str, expression: str) -> bool:
    """Check a version against a range.

    Prereleases only match when the ``||`` clause they satisfy names a
    prerelease of the same major.minor.patch, as in npm with
    ``includePrerelease: false``.
    """
    parsed = parse_version(version)
    spec = compile_range(expression)
    if parsed is None or spec is None:
        return False
    if not parsed.prerelease:
        return spec.match(parsed)
    for clause in _canonical_range(expression).split("||"):
        clause_spec = compile_range(clause)
        if clause_spec is None or not clause_spec.match(parsed):
            continue
        if _admits_prerelease(clause, parsed):
            return True
    return False


def highest_version(versions: Iterable[str]) -> Optional[str]:
    """Return the version with the greatest precedence, or None."""
    best: Optional[str] = None
    best_key: Optional[Tuple] = None
    for candidate in versions:
        key = npm_semver_key(candidate)
        if key is None:
            logger.debug("Skipping unparseable version %r", candidate)
            continue
        # Equal precedence only happens with differing build metadata.
        if best_key is None or (key, candidate) > (best_key, best):
            best, best_key = candidate, key
    return best
