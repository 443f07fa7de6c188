"""Deployment job models"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class PairStatus(str, Enum):
    """Lifecycle of a single (config, platform) pair"""
    PENDING = "Pending"
    RUNNING = "Running"
    INSTALLING = "Installing"
    BUILDING = "Building"
    PROCESSING_ARTIFACT = "ProcessingArtifact"
    SUCCESSFUL = "Successful"
    FAILED = "Failed"
    ESCAPED = "Escaped"

    @property
    def is_terminal(self) -> bool:
        return self in (PairStatus.SUCCESSFUL, PairStatus.FAILED, PairStatus.ESCAPED)


@dataclass
class PairResult:
    """Progress and outcome of one pair"""

    status: PairStatus = PairStatus.PENDING
    completed_tasks: List[str] = field(default_factory=list)
    error: Optional[Exception] = None
    failed_on: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "status": self.status.value,
            "completed_tasks": list(self.completed_tasks),
        }

        if self.error is not None:
            if hasattr(self.error, "to_dict"):
                data["error"] = self.error.to_dict()
            else:
                data["error"] = {
                    "type": self.error.__class__.__name__,
                    "message": str(self.error),
                }
            data["failed_on"] = self.failed_on

        return data


@dataclass
class JobStatus:
    """Aggregated counters of a job"""

    total: int = 0
    successful: int = 0
    failed: int = 0
    escaped: int = 0
    remaining: int = 0
    successful_configs: List[str] = field(default_factory=list)
    failed_configs: List[str] = field(default_factory=list)
    escaped_configs: List[str] = field(default_factory=list)

    def record(self, status: PairStatus, label: str) -> None:
        """Count a pair that reached a terminal status"""
        if not status.is_terminal:
            raise ValueError(f"Cannot record non-terminal status: {status.value}")

        if status == PairStatus.SUCCESSFUL:
            self.successful += 1
            self.successful_configs.append(label)
        elif status == PairStatus.FAILED:
            self.failed += 1
            self.failed_configs.append(label)
        elif status == PairStatus.ESCAPED:
            self.escaped += 1
            self.escaped_configs.append(label)

        self.remaining -= 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "escaped": self.escaped,
            "remaining": self.remaining,
            "successful_configs": list(self.successful_configs),
            "failed_configs": list(self.failed_configs),
            "escaped_configs": list(self.escaped_configs),
        }


@dataclass
class DeploymentJob:
    """State of one ``deploy`` call"""

    configs: List[str]
    platforms: List[str]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    finished: bool = False
    current_config: Optional[str] = None
    last_update: str = ""
    status: JobStatus = field(default_factory=JobStatus)
    results: Dict[str, Dict[str, PairResult]] = field(default_factory=dict)
    start_time: datetime = field(default_factory=datetime.utcnow)
    end_time: Optional[datetime] = None

    def __post_init__(self):
        total = len(self.configs) * len(self.platforms)
        self.status.total = total
        self.status.remaining = total

    @property
    def is_success(self) -> bool:
        """Finished without a single failed pair"""
        return self.finished and self.status.failed == 0

    @property
    def duration(self) -> Optional[float]:
        """Get job duration in seconds"""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def start_pair(self, config_name: str, platform: str) -> PairResult:
        """Create the result record of a pair that begins processing"""
        pair_result = PairResult()
        self.results.setdefault(config_name, {})[platform] = pair_result
        self.current_config = config_name
        return pair_result

    def get_result(self, config_name: str, platform: str) -> Optional[PairResult]:
        """Get the result of a pair"""
        return self.results.get(config_name, {}).get(platform)

    def complete(self) -> None:
        """Mark the job finished and write the final summary"""
        self.finished = True
        self.current_config = None
        self.end_time = datetime.utcnow()

        if self.status.failed == 0:
            self.last_update = (
                f"Job finished successfully: {self.status.successful} succeeded, "
                f"{self.status.escaped} escaped."
            )
        else:
            self.last_update = (
                f"Job finished with {self.status.failed} failure(s): "
                f"{', '.join(self.status.failed_configs)}."
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "configs": list(self.configs),
            "platforms": list(self.platforms),
            "finished": self.finished,
            "current_config": self.current_config,
            "last_update": self.last_update,
            "status": self.status.to_dict(),
            "results": {
                config_name: {
                    platform: result.to_dict()
                    for platform, result in platforms.items()
                }
                for config_name, platforms in self.results.items()
            },
            "duration": self.duration,
        }
