"""Version management utilities"""

from typing import Optional

from packaging.version import Version

from ..constants import DOTTED_VERSION_PATTERN


def derive_version(version_name: Optional[str]) -> Optional[str]:
    """
    Derive a semantic version from a display version name

    The first ``<major>.<minor>.<patch>`` run of digits wins, so
    ``"2.04.1 (beta)"`` yields ``"2.4.1"``.

    Args:
        version_name: Display version such as ``"1.2.3-rc1"``

    Returns:
        Normalized ``"<major>.<minor>.<patch>"`` or None if there is no match
    """
    if not isinstance(version_name, str):
        return None

    match = DOTTED_VERSION_PATTERN.search(version_name)
    if not match:
        return None

    return Version(".".join(match.groups())).base_version
