"""Shared packument builders for the test suite."""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Optional

import pytest

from safe_npm.semver_utils import npm_semver_key


NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def iso_days_ago(days: float, now: Optional[datetime] = None) -> str:
    moment = (now or NOW) - timedelta(days=days)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def make_packument(
    name: str,
    version_dates: Dict[str, str],
    dist_tags: Optional[Dict[str, str]] = None,
    now: Optional[datetime] = None,
) -> Dict:
    """Build a registry document; latest points at the highest version by default."""
    time_data = {
        "created": iso_days_ago(1000, now),
        "modified": iso_days_ago(1, now),
    }
    versions = {}
    for version, published in version_dates.items():
        versions[version] = {"name": name, "version": version}
        time_data[version] = published

    if dist_tags is None:
        ordered = sorted(version_dates, key=npm_semver_key)
        dist_tags = {"latest": ordered[-1] if ordered else "0.0.0"}

    return {
        "name": name,
        "versions": versions,
        "time": time_data,
        "dist-tags": dist_tags,
    }


@pytest.fixture
def write_fixtures(tmp_path: Path):
    """Write packuments to a fixtures file and return its path."""

    def _write(packuments: Dict[str, Dict]) -> Path:
        path = tmp_path / "registry.json"
        path.write_text(json.dumps(packuments, indent=2), encoding="utf-8")
        return path

    return _write
