import json
from pathlib import Path

import pytest
import requests

from safe_npm.errors import InvalidCatalogError, RegistryFetchError
from safe_npm.registry import FixtureCatalogSource, RegistryClient, packument_url

from conftest import iso_days_ago, make_packument


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=None):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self.json_error is not None:
            raise self.json_error
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, timeout=None, headers=None):
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def test_packument_url_encodes_scoped_names_and_trims_slash():
    assert packument_url("https://registry.example/", "@scope/pkg") == "https://registry.example/%40scope%2Fpkg"
    assert packument_url("https://registry.example", "left-pad") == "https://registry.example/left-pad"


def test_fetch_catalog_uses_timeout_and_caches():
    session = FakeSession(FakeResponse(make_packument("alpha", {"1.0.0": iso_days_ago(100)})))
    client = RegistryClient("https://registry.example/", timeout=3, session=session)

    first = client.fetch_catalog("alpha")
    second = client.fetch_catalog("alpha")

    assert first is second
    assert first.versions == frozenset({"1.0.0"})
    assert session.calls == [("https://registry.example/alpha", 3)]


def test_timeout_becomes_registry_fetch_error():
    client = RegistryClient(session=FakeSession(error=requests.Timeout("slow")), timeout=2)

    with pytest.raises(RegistryFetchError) as excinfo:
        client.fetch_catalog("slow-pkg")

    assert "timed out after 2 seconds" in str(excinfo.value)
    assert excinfo.value.name == "slow-pkg"


def test_connection_error_becomes_registry_fetch_error():
    client = RegistryClient(session=FakeSession(error=requests.ConnectionError("refused")))

    with pytest.raises(RegistryFetchError) as excinfo:
        client.fetch_catalog("offline")

    assert "refused" in str(excinfo.value)


def test_http_error_status_is_reported():
    client = RegistryClient(session=FakeSession(FakeResponse(status_code=404)))

    with pytest.raises(RegistryFetchError) as excinfo:
        client.fetch_catalog("missing")

    assert "HTTP 404" in str(excinfo.value)


def test_malformed_json_is_a_fetch_error():
    error = requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
    client = RegistryClient(session=FakeSession(FakeResponse(json_error=error)))

    with pytest.raises(RegistryFetchError) as excinfo:
        client.fetch_catalog("html")

    assert "malformed JSON" in str(excinfo.value)


def test_non_object_body_is_an_invalid_catalog():
    client = RegistryClient(session=FakeSession(FakeResponse(payload=["not", "an", "object"])))

    with pytest.raises(InvalidCatalogError):
        client.fetch_catalog("weird")


def test_fixture_source_serves_packuments(write_fixtures):
    path = write_fixtures({"alpha": make_packument("alpha", {"1.0.0": iso_days_ago(100)})})
    source = FixtureCatalogSource(path)

    catalog = source.fetch_catalog("alpha")

    assert catalog.name == "alpha"
    with pytest.raises(RegistryFetchError) as excinfo:
        source.fetch_catalog("beta")
    assert "not found" in str(excinfo.value)


def test_fixture_source_reports_unreadable_file(tmp_path: Path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(RegistryFetchError):
        FixtureCatalogSource(path).fetch_catalog("alpha")


def test_fixture_source_rejects_non_object_entry(tmp_path: Path):
    path = tmp_path / "registry.json"
    path.write_text(json.dumps({"alpha": "nope"}), encoding="utf-8")

    with pytest.raises(InvalidCatalogError):
        FixtureCatalogSource(path).fetch_catalog("alpha")
