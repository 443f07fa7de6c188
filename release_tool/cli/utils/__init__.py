"""CLI utility functions"""

from .output import (
    ConsoleEventHandler,
    format_job_result,
    format_install_result,
    format_build_result,
    print_json,
)

__all__ = [
    'ConsoleEventHandler',
    'format_job_result',
    'format_install_result',
    'format_build_result',
    'print_json',
]
