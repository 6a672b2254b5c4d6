"""Top-level package for insti.

Capture, restore, rotate and remove the state of an installed application
described by an installation.xml manifest.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("insti")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"
