"""Utility functions for release-tool"""

from .file_utils import (
    resolve_path,
    read_json,
    find_files_matching,
    overlay_directory,
    temporary_build_dir,
    format_size,
)

from .version_utils import derive_version

from .hash_utils import digest_file

from .async_utils import run_async

from .process_utils import CommandResult, run_command

__all__ = [
    "resolve_path",
    "read_json",
    "find_files_matching",
    "overlay_directory",
    "temporary_build_dir",
    "format_size",
    "derive_version",
    "digest_file",
    "run_async",
    "CommandResult",
    "run_command",
]
