"""Bonding-curve token launchpad."""

from launchpad.admin import AdminController
from launchpad.registry import AssetRecord, GlobalParameters, Registry
from launchpad.system import Launchpad, build_launchpad, get_default_launchpad

__version__ = "0.1.0"
__all__ = [
    "AdminController",
    "AssetRecord",
    "GlobalParameters",
    "Launchpad",
    "Registry",
    "build_launchpad",
    "get_default_launchpad",
    "__version__",
]
