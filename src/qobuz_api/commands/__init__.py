"""Command groups for the qobuz CLI.

This package provides sub-apps that are mounted by qobuz_api.cli.
"""

from . import config as config  # noqa: F401
from . import favorites as favorites  # noqa: F401
from . import get as get  # noqa: F401
from . import search as search  # noqa: F401
from . import tag as tag  # noqa: F401

__all__ = [
    "config",
    "favorites",
    "get",
    "search",
    "tag",
]
