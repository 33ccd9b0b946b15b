"""bson2sql - Convert MongoDB BSON exports into SQL import scripts."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("bson2sql")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = ["__version__"]
