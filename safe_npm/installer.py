"""
Hand resolved versions to npm.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional

from .manifest import write_overrides


logger = logging.getLogger(__name__)

STRATEGIES = ("direct", "overrides")


class NpmInstaller:
    """Install resolved versions with ``npm install``.

    ``direct`` passes every ``name@version`` to npm; ``overrides`` pins the
    versions in package.json first and then runs a plain install.
    """

    def __init__(
        self,
        registry: str,
        strategy: str = "direct",
        cwd: Optional[Path] = None,
        npm: str = "npm",
    ) -> None:
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy: {strategy}")
        self.registry = registry
        self.strategy = strategy
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.npm = npm

    def build_command(self, resolved: Mapping[str, str]) -> List[str]:
        cmd = [self.npm, "install"]
        if self.strategy == "direct":
            cmd.extend(f"{name}@{version}" for name, version in resolved.items())
        cmd.extend(["--registry", self.registry])
        return cmd

    def install(self, resolved: Mapping[str, str]) -> int:
        if self.strategy == "overrides":
            write_overrides(self.cwd, resolved)
            print("\nUpdated package.json overrides. Running npm install...")

        cmd = self.build_command(resolved)
        print(f"\nRunning: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, cwd=self.cwd)
        except FileNotFoundError:
            logger.error("npm executable %r not found", self.npm)
            return 1
        return result.returncode
