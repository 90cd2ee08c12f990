"""Package version for lru-collection.

An installed distribution reports its version through package metadata. A
source checkout that was never installed reads it from the neighbouring
pyproject.toml instead.
"""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "lru-collection"
_PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _checkout_version(pyproject: Path = _PYPROJECT) -> str:
    try:
        with pyproject.open("rb") as f:
            return tomllib.load(f)["project"]["version"]
    except (OSError, KeyError, tomllib.TOMLDecodeError):
        return "0.0.0-dev"


try:
    __version__ = version(DISTRIBUTION_NAME)
except PackageNotFoundError:
    __version__ = _checkout_version()
