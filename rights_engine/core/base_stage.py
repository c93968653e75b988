"""Per-stage outcome records kept on each extraction run."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class StageStatus(Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class StageResult:
    """Outcome of one run stage (harvest, normalize or validate).

    ``data`` holds stage counters that end up in the run log and response.
    """
    status: StageStatus
    data: dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == StageStatus.COMPLETED
