import threading
import time

from safe_npm.batch import resolve_all
from safe_npm.catalog import catalog_from_packument
from safe_npm.errors import RegistryFetchError
from safe_npm.models import OutcomeStatus, ResolutionRequest
from safe_npm.resolvers import SafeVersionResolver
from safe_npm.time_utils import compute_cutoff

from conftest import NOW, iso_days_ago, make_packument


CUTOFF = compute_cutoff(90, NOW)


class SlowSource:
    """Returns catalogs with per-package delays so completion order differs."""

    def __init__(self, packuments, delays=None, failing=()):
        self.packuments = packuments
        self.delays = delays or {}
        self.failing = set(failing)
        self.threads = set()

    def fetch_catalog(self, name):
        self.threads.add(threading.get_ident())
        time.sleep(self.delays.get(name, 0))
        if name in self.failing:
            raise RegistryFetchError(name, "request timed out after 10 seconds")
        return catalog_from_packument(self.packuments[name], name)


def _requests(names):
    return [
        ResolutionRequest(name=name, raw_range="latest", registry="https://r.example", cutoff=CUTOFF)
        for name in names
    ]


def _packuments():
    return {
        "alpha": make_packument("alpha", {"1.0.0": iso_days_ago(400), "1.2.0": iso_days_ago(20)}),
        "beta": make_packument("beta", {"2.0.0": iso_days_ago(200)}),
        "recent": make_packument("recent", {"1.0.0": iso_days_ago(5)}),
    }


def test_failures_do_not_stop_other_dependencies():
    source = SlowSource(_packuments(), failing={"down"})
    outcomes = resolve_all(_requests(["alpha", "down", "recent", "beta"]), SafeVersionResolver(source))

    assert [o.name for o in outcomes] == ["alpha", "down", "recent", "beta"]
    assert [o.status for o in outcomes] == [
        OutcomeStatus.RESOLVED,
        OutcomeStatus.FAILED,
        OutcomeStatus.NO_QUALIFYING_VERSION,
        OutcomeStatus.RESOLVED,
    ]
    assert outcomes[0].version == "1.0.0"
    assert outcomes[3].version == "2.0.0"


def test_concurrent_resolution_keeps_request_order():
    source = SlowSource(_packuments(), delays={"alpha": 0.05, "beta": 0.0, "recent": 0.02})
    names = ["alpha", "beta", "recent"]

    outcomes = resolve_all(_requests(names), SafeVersionResolver(source), max_workers=3)

    assert [o.name for o in outcomes] == names
    assert outcomes[0].version == "1.0.0"
    assert outcomes[1].version == "2.0.0"
    assert outcomes[2].status is OutcomeStatus.NO_QUALIFYING_VERSION


def test_concurrent_and_sequential_results_match():
    names = ["alpha", "beta", "recent"]

    sequential = resolve_all(_requests(names), SafeVersionResolver(SlowSource(_packuments())))
    concurrent = resolve_all(_requests(names), SafeVersionResolver(SlowSource(_packuments())), max_workers=4)

    assert sequential == concurrent


def test_empty_batch():
    assert resolve_all([], SafeVersionResolver(SlowSource({}))) == []
