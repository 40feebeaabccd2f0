"""
Read dependency requests from package specs and package.json.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping

from .errors import ManifestError
from .models import DependencySpec


logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"


def parse_package_spec(spec: str) -> DependencySpec:
    """Split ``name@range`` (scoped names included); a missing range means latest."""
    if not spec:
        raise ManifestError("Empty package spec provided")

    if spec.startswith("@"):
        at_index = spec.find("@", 1)
    else:
        at_index = spec.rfind("@")

    if at_index <= 0:
        return DependencySpec(name=spec, range="latest")
    return DependencySpec(name=spec[:at_index], range=spec[at_index + 1:] or "latest")


def collect_from_args(specs: Iterable[str]) -> Dict[str, str]:
    dependencies: Dict[str, str] = {}
    for spec in specs:
        parsed = parse_package_spec(spec)
        dependencies[parsed.name] = parsed.range
    return dependencies


def load_package_json(directory: Path) -> Dict:
    path = Path(directory) / PACKAGE_JSON
    if not path.exists():
        raise ManifestError(f"No {PACKAGE_JSON} found in {directory}.")
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ManifestError(f"Cannot read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestError(f"{path} must contain a JSON object")
    return data


def collect_from_package_json(
    directory: Path, dev_only: bool = False, prod_only: bool = False
) -> Dict[str, str]:
    """Collect dependency ranges from package.json.

    devDependencies are read first so that a name listed in both sections
    keeps its production range.
    """
    pkg = load_package_json(directory)
    dependencies: Dict[str, str] = {}

    sections: List[str] = []
    if not prod_only:
        sections.append("devDependencies")
    if not dev_only:
        sections.append("dependencies")

    for section in sections:
        entries = pkg.get(section) or {}
        if not isinstance(entries, dict):
            logger.warning("Ignoring malformed %s section in %s", section, PACKAGE_JSON)
            continue
        for name, version_range in entries.items():
            dependencies[name] = version_range if isinstance(version_range, str) else ""
    return dependencies


def write_overrides(directory: Path, resolved: Mapping[str, str]) -> Path:
    """Merge resolved versions into the ``overrides`` field of package.json."""
    pkg = load_package_json(directory)
    overrides = pkg.get("overrides") if isinstance(pkg.get("overrides"), dict) else {}
    pkg["overrides"] = {**overrides, **resolved}

    path = Path(directory) / PACKAGE_JSON
    with open(path, "w", encoding="utf-8") as f:
        f.write(json.dumps(pkg, indent=2, ensure_ascii=False) + "\n")
    logger.info("Wrote %d overrides to %s", len(resolved), path)
    return path
