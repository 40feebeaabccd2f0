"""
safe-npm

Resolve npm dependencies to the newest versions that satisfy their ranges and
have been published for at least a minimum number of days.
"""

__version__ = "0.1.0"

from .cli import main
from .errors import InvalidCatalogError, RegistryFetchError, UnsupportedRangeError
from .ranges import normalize_range
from .resolvers import SafeVersionResolver, select_version

__all__ = [
    "main",
    "normalize_range",
    "select_version",
    "SafeVersionResolver",
    "UnsupportedRangeError",
    "RegistryFetchError",
    "InvalidCatalogError",
]
