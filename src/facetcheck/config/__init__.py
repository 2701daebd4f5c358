"""
Global configuration. Settings are read from ``facetcheck.{yml,yaml,toml}``
files and from environment variables prefixed with ``FACETCHECK_``
(*e.g.* ``FACETCHECK_SEED=42``).
"""

from ._settings import ProgressLevel, settings

__all__ = ["ProgressLevel", "settings"]
