"""gitsage: split a working-tree diff into semantic commits."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("gitsage")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
