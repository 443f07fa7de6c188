"""Version information for release-tool package"""

__version__ = "0.3.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))
__author__ = "release-tool contributors"
__email__ = "maintainers@release-tool.dev"
__license__ = "MIT"
