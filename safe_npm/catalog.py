"""
Parse registry packuments into VersionCatalog instances.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .errors import InvalidCatalogError
from .models import VersionCatalog
from .time_utils import parse_timestamp


logger = logging.getLogger(__name__)

RESERVED_TIME_KEYS = ("created", "modified")


def _mapping_field(data: Dict, key: str, name: str) -> Dict:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidCatalogError(
            name, f"'{key}' must be an object, got {type(value).__name__}"
        )
    return value


def catalog_from_packument(data: Any, name: Optional[str] = None) -> VersionCatalog:
    """Build a VersionCatalog from a registry document.

    Args:
        data: Decoded JSON document returned by the registry
        name: Requested package name, used when the document has none

    Returns:
        Validated catalog

    Raises:
        InvalidCatalogError: If the document is not a JSON object or one of
            its known fields has the wrong shape
    """
    label = name or "<unknown>"
    if not isinstance(data, dict):
        raise InvalidCatalogError(label, "expected a JSON object")

    catalog_name = data.get("name") if isinstance(data.get("name"), str) else None
    catalog_name = catalog_name or label

    versions = frozenset(_mapping_field(data, "versions", catalog_name).keys())
    time_data = _mapping_field(data, "time", catalog_name)
    dist_tags_raw = _mapping_field(data, "dist-tags", catalog_name)

    published_at = {}
    for key, timestamp in time_data.items():
        if key in RESERVED_TIME_KEYS:
            continue
        parsed = parse_timestamp(timestamp)
        if parsed is None:
            logger.warning("Ignoring unparseable publish time for %s@%s: %r", catalog_name, key, timestamp)
            continue
        published_at[key] = parsed

    dist_tags = {
        tag: target for tag, target in dist_tags_raw.items() if isinstance(target, str)
    }

    return VersionCatalog(
        name=catalog_name,
        versions=versions,
        published_at=published_at,
        dist_tags=dist_tags,
        created=parse_timestamp(time_data.get("created")),
        modified=parse_timestamp(time_data.get("modified")),
    )
