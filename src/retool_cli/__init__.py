"""Retool CLI - scaffold Retool DB tables, CRUD workflows and apps."""

from .version import __version__

from .main import main

__all__ = ["main", "__version__"]
