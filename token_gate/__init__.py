"""token-gate: a health check plus one token-gated endpoint.

The version resolves from installed metadata; a source checkout reports 0.0.0.
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("token-gate")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
