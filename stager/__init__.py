"""
Stager - build artifact installation and package export

This package installs already-built libraries, plugins and files into
per-platform, per-build-variant layouts and generates the package
description that downstream CMake builds import.
"""

__version__ = "0.4.0"


def main(*args, **kwargs):
    """Lazy import to avoid CLI startup side effects during help paths."""
    from .main import main as _main

    return _main(*args, **kwargs)


__all__ = ["main", "__version__"]
