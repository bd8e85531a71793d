"""Installed package version."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("retool-cli")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for source checkouts without metadata
