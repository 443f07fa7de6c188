"""Subprocess execution utilities"""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of an external command"""
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out


async def run_command(args: List[str],
                      cwd: Optional[Path] = None,
                      env: Optional[Dict[str, str]] = None,
                      timeout: Optional[float] = None) -> CommandResult:
    """
    Run an external command and capture its output

    Args:
        args: Program and arguments
        cwd: Working directory
        env: Extra environment variables, merged over the current environment
        timeout: Seconds before the process is killed

    Returns:
        CommandResult

    Raises:
        OSError: If the program cannot be started
    """
    process_env = os.environ.copy()
    if env:
        process_env.update(env)

    logger.debug(f"Running: {' '.join(str(a) for a in args)}")

    process = await asyncio.create_subprocess_exec(
        *[str(a) for a in args],
        cwd=str(cwd) if cwd else None,
        env=process_env,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE
    )

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        logger.error(f"Command timed out after {timeout}s: {args[0]}")
        return CommandResult(returncode=-1, timed_out=True)

    return CommandResult(
        returncode=process.returncode,
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
    )
