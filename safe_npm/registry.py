"""
Registry metadata sources.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import quote

import requests

from .catalog import catalog_from_packument
from .errors import RegistryFetchError
from .models import VersionCatalog


logger = logging.getLogger(__name__)

DEFAULT_REGISTRY = "https://registry.npmjs.org"
REQUEST_TIMEOUT = 10


def normalize_registry(registry: str) -> str:
    return registry[:-1] if registry.endswith("/") else registry


def packument_url(registry: str, name: str) -> str:
    """URL of a package document; scoped names stay one path segment."""
    return f"{normalize_registry(registry)}/{quote(name, safe='')}"


@dataclass
class ResolverCache:
    """In-memory catalog cache shared by one run."""

    catalogs: Dict[str, VersionCatalog] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def get(self, name: str) -> Optional[VersionCatalog]:
        with self.lock:
            return self.catalogs.get(name)

    def put(self, name: str, catalog: VersionCatalog) -> None:
        with self.lock:
            self.catalogs[name] = catalog


class RegistryClient:
    """Fetch packuments over HTTP."""

    def __init__(
        self,
        registry: str = DEFAULT_REGISTRY,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
        cache: Optional[ResolverCache] = None,
    ) -> None:
        self.registry = normalize_registry(registry)
        self.timeout = timeout
        self.session = session or requests.Session()
        self.cache = cache or ResolverCache()

    def fetch_packument(self, name: str) -> object:
        url = packument_url(self.registry, name)
        logger.info("Fetching metadata for %s", name)
        try:
            with self.session.get(
                url, timeout=self.timeout, headers={"Accept": "application/json"}
            ) as response:
                response.raise_for_status()
                return response.json()
        except requests.Timeout as e:
            raise RegistryFetchError(name, f"request timed out after {self.timeout} seconds") from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            raise RegistryFetchError(name, f"registry returned HTTP {status}") from e
        except requests.exceptions.JSONDecodeError as e:
            raise RegistryFetchError(name, f"malformed JSON in registry response: {e}") from e
        except requests.RequestException as e:
            raise RegistryFetchError(name, str(e)) from e
        except ValueError as e:
            raise RegistryFetchError(name, f"malformed JSON in registry response: {e}") from e

    def fetch_catalog(self, name: str) -> VersionCatalog:
        cached = self.cache.get(name)
        if cached is not None:
            logger.debug("Cache hit: catalog %s", name)
            return cached

        catalog = catalog_from_packument(self.fetch_packument(name), name)
        self.cache.put(name, catalog)
        return catalog


class FixtureCatalogSource:
    """Serve packuments from a JSON file mapping package name to document."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._packuments: Optional[Dict] = None

    def _load(self, name: str) -> Dict:
        if self._packuments is None:
            logger.info("Loading registry fixtures from %s", self.path)
            try:
                with open(self.path, encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                raise RegistryFetchError(name, f"cannot read fixtures {self.path}: {e}") from e
            if not isinstance(data, dict):
                raise RegistryFetchError(name, f"fixtures {self.path} must contain a JSON object")
            self._packuments = data
        return self._packuments

    def fetch_catalog(self, name: str) -> VersionCatalog:
        packuments = self._load(name)
        if name not in packuments:
            raise RegistryFetchError(name, "package not found in fixtures")
        return catalog_from_packument(packuments[name], name)
