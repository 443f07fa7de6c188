"""Copy produced artifacts into a drop directory"""

import asyncio
import json
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from ..base import ArtifactProcessor
from ...core.config_evaluator import Property
from ...models.result import ArtifactInfo, ProcessResult
from ...utils.file_utils import atomic_write, format_size
from ...utils.hash_utils import digest_file


class CopyArtifactProcessor(ArtifactProcessor):
    """Copy each artifact to ``<destination>/<config>/<platform>/``

    A ``<artifact>.json`` manifest with the checksum and the installed
    settings is written next to the copy.
    """

    type_name = "copy"

    OPTIONS_SCHEMA = {
        "destination": Property("string").named("Drop directory"),
    }

    @property
    def destination(self) -> Path:
        return Path(self.config["destination"]).expanduser().resolve()

    async def process(self, artifact_info: ArtifactInfo) -> ProcessResult:
        source = Path(artifact_info.artifact_path)
        if not source.is_file():
            return ProcessResult(success=False, message=f"Artifact not found: {source}")

        target_dir = self.destination / artifact_info.config_name / artifact_info.platform.lower()
        target = target_dir / source.name

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            await asyncio.get_running_loop().run_in_executor(None, shutil.copy2, source, target)

            checksum, size = await digest_file(target)

            manifest = self._build_manifest(artifact_info, checksum, size)
            atomic_write(target.with_name(f"{target.name}.json"),
                         json.dumps(manifest, indent=2, default=str))

        except OSError as e:
            self.logger.error(f"Failed to copy {source} to {target_dir}: {e}")
            return ProcessResult(success=False, message=f"Copy failed: {e}")

        self.logger.info(f"Copied {source.name} to {target_dir} ({format_size(size)})")

        return ProcessResult(
            success=True,
            message=f"Copied to {target}",
            details={"path": str(target), "sha256": checksum, "size": size},
        )

    def _build_manifest(self, artifact_info: ArtifactInfo, checksum: str, size: int) -> Dict[str, Any]:
        return {
            "config": artifact_info.config_name,
            "platform": artifact_info.platform,
            "store_release": artifact_info.store_release,
            "artifact": Path(artifact_info.artifact_path).name,
            "sha256": checksum,
            "size": size,
            "settings": dict(artifact_info.config_settings),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
