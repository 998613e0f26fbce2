"""
Package version for airspace-nil.

An installed distribution reports its own version. A source checkout that
was never installed reads ``[project].version`` from the repository's
pyproject.toml, and anything unreadable there yields FALLBACK_VERSION.
"""
import importlib.metadata
import pathlib

import tomli

DISTRIBUTION = "airspace-nil"
PYPROJECT = pathlib.Path(__file__).resolve().parent.parent / "pyproject.toml"
FALLBACK_VERSION = "0.1.0"


def _read_pyproject_version(pyproject: pathlib.Path = PYPROJECT) -> str:
    try:
        with pyproject.open("rb") as f:
            project = tomli.load(f)["project"]
        return str(project["version"])
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError):
        return FALLBACK_VERSION


def _lookup_version() -> str:
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return _read_pyproject_version()


__version__ = _lookup_version()
