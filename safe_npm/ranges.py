"""
Normalize user supplied version specifiers into semver ranges.
"""

from __future__ import annotations

from typing import Mapping, Optional

from .errors import UnsupportedRangeError
from .semver_utils import is_valid_range, parse_version


LATEST_TAG = "latest"
ANY_RANGE = "*"


def _up_to_tag(dist_tags: Mapping[str, str], tag: str) -> Optional[str]:
    target = parse_version(dist_tags.get(tag))
    if target is None:
        return None
    return f"<={target.truncate('prerelease')}"


def normalize_range(raw_range: Optional[str], dist_tags: Optional[Mapping[str, str]] = None) -> str:
    """Turn a raw specifier into a concrete semver range.

    Empty input and ``latest`` become ``<=<latest version>`` (or ``*`` when
    the package has no usable latest tag). Valid ranges pass through
    unchanged. Any other value is looked up as a dist-tag and bounded from
    above by the tagged version, so an age filter can still step below it.

    Raises:
        UnsupportedRangeError: If the value is neither a range nor a known tag
    """
    dist_tags = dist_tags or {}
    trimmed = (raw_range or "").strip()

    if not trimmed or trimmed == LATEST_TAG:
        return _up_to_tag(dist_tags, LATEST_TAG) or ANY_RANGE

    if is_valid_range(trimmed):
        return trimmed

    tagged = _up_to_tag(dist_tags, trimmed)
    if tagged is not None:
        return tagged

    raise UnsupportedRangeError(raw_range)
