"""Run an external command on produced artifacts"""

import shlex
from typing import Dict, List

from ..base import ArtifactProcessor
from ...constants import DEFAULT_COMMAND_TIMEOUT, ENV_PREFIX
from ...core.config_evaluator import Property
from ...models.result import ArtifactInfo, ProcessResult
from ...utils.process_utils import run_command


class CommandProcessor(ArtifactProcessor):
    """Execute a command for each artifact, e.g. an upload script

    Arguments may reference ``{artifact}``, ``{config}`` and ``{platform}``.
    The artifact context is also exported as ``RELEASE_TOOL_*`` variables.
    A non-zero exit code fails the pair.
    """

    type_name = "command"

    OPTIONS_SCHEMA = {
        "command": Property("string").named("Command line"),
        "timeout": Property("number").default(DEFAULT_COMMAND_TIMEOUT),
        "cwd": Property("string").optional(),
    }

    @property
    def timeout(self) -> float:
        return self.config.get("timeout") or DEFAULT_COMMAND_TIMEOUT

    def build_args(self, artifact_info: ArtifactInfo) -> List[str]:
        """Split the command line and fill in the placeholders"""
        values = {
            "artifact": str(artifact_info.artifact_path),
            "config": artifact_info.config_name,
            "platform": artifact_info.platform,
        }
        return [arg.format(**values) for arg in shlex.split(self.config["command"])]

    def build_env(self, artifact_info: ArtifactInfo) -> Dict[str, str]:
        env = {
            f"{ENV_PREFIX}ARTIFACT": str(artifact_info.artifact_path),
            f"{ENV_PREFIX}CONFIG_NAME": artifact_info.config_name,
            f"{ENV_PREFIX}PLATFORM": artifact_info.platform,
            f"{ENV_PREFIX}STORE_RELEASE": "1" if artifact_info.store_release else "0",
        }

        # Flat settings such as "Application Version" become RELEASE_TOOL_APPLICATION_VERSION
        for key, value in artifact_info.config_settings.items():
            if isinstance(value, (str, int, float, bool)):
                env_key = "".join(c if c.isalnum() else "_" for c in key).upper()
                env[f"{ENV_PREFIX}SETTING_{env_key}"] = str(value)

        return env

    async def process(self, artifact_info: ArtifactInfo) -> ProcessResult:
        try:
            args = self.build_args(artifact_info)
        except (KeyError, IndexError, ValueError) as e:
            return ProcessResult(success=False, message=f"Invalid command line: {e}")

        self.logger.info(f"Executing: {' '.join(args)}")

        try:
            result = await run_command(
                args,
                cwd=self.config.get("cwd"),
                env=self.build_env(artifact_info),
                timeout=self.timeout,
            )
        except OSError as e:
            return ProcessResult(success=False, message=f"Failed to execute command: {e}")

        if result.stdout:
            self.logger.info(f"Command output: {result.stdout.strip()}")
        if result.stderr:
            self.logger.warning(f"Command error: {result.stderr.strip()}")

        if result.timed_out:
            return ProcessResult(success=False, message=f"Command timed out after {self.timeout}s")

        details = {"returncode": result.returncode}
        if result.returncode != 0:
            return ProcessResult(
                success=False,
                message=f"Command exited with code {result.returncode}",
                details=details,
            )

        return ProcessResult(success=True, message="Command completed", details=details)
