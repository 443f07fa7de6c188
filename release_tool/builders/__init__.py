"""Platform builders"""

from .base import PlatformBuilder, NativeProjectBuilder
from .android import AndroidBuilder
from .ios import IosBuilder
from .factory import BuilderFactory

__all__ = [
    "PlatformBuilder",
    "NativeProjectBuilder",
    "AndroidBuilder",
    "IosBuilder",
    "BuilderFactory",
]
