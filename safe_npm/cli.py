"""
Command-line interface for safe-npm.
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional

from .batch import resolve_all
from .config import DEFAULT_JOBS, DEFAULT_MIN_AGE_DAYS, Settings
from .errors import ManifestError
from .installer import STRATEGIES, NpmInstaller
from .interfaces import Installer
from .manifest import collect_from_args, collect_from_package_json
from .models import ResolutionRequest
from .registry import REQUEST_TIMEOUT, FixtureCatalogSource, RegistryClient
from .reporting import format_failures, format_resolved, save_report
from .resolvers import SafeVersionResolver


logger = logging.getLogger(__name__)

COMMANDS = ("install",)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="safe-npm",
        description="Install npm dependencies with a minimum publish age"
    )
    subparsers = parser.add_subparsers(dest="command")

    install = subparsers.add_parser(
        "install",
        help="Resolve and install the newest versions old enough to trust"
    )

    install.add_argument(
        "packages",
        nargs="*",
        help="Packages as name or name@range. Default: dependencies from package.json"
    )

    install.add_argument(
        "--min-age-days",
        default=str(DEFAULT_MIN_AGE_DAYS),
        help=f"Minimum publish age in days. Default: {DEFAULT_MIN_AGE_DAYS}"
    )

    install.add_argument(
        "--registry",
        default=None,
        help="npm registry to query. Default: $SAFE_NPM_REGISTRY or https://registry.npmjs.org"
    )

    install.add_argument(
        "--dry-run",
        action="store_true",
        help="Show planned versions without installing"
    )

    install.add_argument(
        "--strict",
        action="store_true",
        help="Exit with an error when a dependency cannot be resolved"
    )

    install.add_argument(
        "--dev",
        action="store_true",
        help="Only target devDependencies from package.json"
    )

    install.add_argument(
        "--prod-only",
        action="store_true",
        help="Only target dependencies from package.json"
    )

    install.add_argument(
        "--ignore",
        default="",
        help="Comma-separated packages that bypass the age check"
    )

    install.add_argument(
        "--strategy",
        type=str.lower,
        choices=STRATEGIES,
        default="direct",
        help="Installation strategy. Default: direct"
    )

    install.add_argument(
        "--timeout",
        type=float,
        default=REQUEST_TIMEOUT,
        help=f"Registry request timeout in seconds. Default: {REQUEST_TIMEOUT}"
    )

    install.add_argument(
        "--jobs",
        type=int,
        default=DEFAULT_JOBS,
        help=f"Number of concurrent resolutions. Default: {DEFAULT_JOBS}"
    )

    install.add_argument(
        "--report",
        default=None,
        help="Write resolution outcomes to a .csv or .json file"
    )

    install.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while resolving"
    )

    install.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Enable logging (-vv for debug output)"
    )

    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        return
    logging.basicConfig(
        level=logging.DEBUG if verbosity > 1 else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_resolver(settings: Settings) -> SafeVersionResolver:
    if settings.fixtures is not None:
        logger.info("Using registry fixtures from %s", settings.fixtures)
        return SafeVersionResolver(FixtureCatalogSource(settings.fixtures))
    return SafeVersionResolver(RegistryClient(settings.registry, timeout=settings.timeout))


def _collect_dependencies(packages: List[str], settings: Settings) -> Dict[str, str]:
    if packages:
        return collect_from_args(packages)
    return collect_from_package_json(
        settings.cwd, dev_only=settings.dev_only, prod_only=settings.prod_only
    )


def run_install(
    settings: Settings, packages: List[str], installer: Optional[Installer] = None
) -> int:
    """Resolve the requested dependencies and install them unless dry-run."""
    try:
        dependencies = _collect_dependencies(packages, settings)
    except ManifestError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not dependencies:
        print("No dependencies to process.")
        return 0

    cutoff_label = settings.cutoff.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    print(f"Using minimum age of {settings.min_age_days:g} days (cutoff {cutoff_label}).")

    requests = [
        ResolutionRequest(
            name=name,
            raw_range=version_range,
            registry=settings.registry,
            cutoff=settings.cutoff,
            bypass_age=name in settings.ignore,
        )
        for name, version_range in dependencies.items()
    ]
    outcomes = resolve_all(
        requests,
        _build_resolver(settings),
        max_workers=settings.jobs,
        show_progress=settings.show_progress,
    )

    if settings.report is not None:
        report_file = save_report(outcomes, settings.report)
        print(f"Report saved to: {report_file}")

    failures = format_failures(outcomes)
    if failures:
        print("\nDependencies that could not be resolved safely:")
        for line in failures:
            print(line)
        if settings.strict:
            return 1

    resolved = {outcome.name: outcome.version for outcome in outcomes if outcome.ok}
    if not resolved:
        print("\nNo dependencies qualified for installation.")
        return 1 if settings.strict and failures else 0

    print("\nSafe versions to install:")
    for line in format_resolved(outcomes):
        print(line)

    if settings.dry_run:
        print("\nDry run enabled. No changes were made.")
        return 0

    if installer is None:
        installer = NpmInstaller(settings.registry, strategy=settings.strategy, cwd=settings.cwd)
    return installer.install(resolved)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    args_list = list(sys.argv[1:] if argv is None else argv)
    if not args_list or args_list[0] not in COMMANDS + ("-h", "--help"):
        args_list.insert(0, "install")

    parser = build_parser()
    args = parser.parse_args(args_list)
    _configure_logging(args.verbose)

    try:
        settings = Settings.from_options(args)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    return run_install(settings, args.packages)


if __name__ == "__main__":
    sys.exit(main())
