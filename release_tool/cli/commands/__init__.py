"""CLI commands"""

from . import deploy
from . import install
from . import build
from . import validate

__all__ = [
    "deploy",
    "install",
    "build",
    "validate",
]
