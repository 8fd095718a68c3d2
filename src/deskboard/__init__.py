"""deskboard: service-desk console for a REST issue tracker."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("deskboard")
except PackageNotFoundError:
    __version__ = "dev"
