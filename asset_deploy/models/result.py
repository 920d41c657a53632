"""Operation result models"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import Phase


@dataclass
class PublishResult:
    """Result of a publish pipeline run"""

    published: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    invalidated: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)
    total_bytes: int = 0
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return not self.failed

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "published": self.published,
            "failed": self.failed,
            "invalidated": self.invalidated,
            "errors": self.errors,
            "total_bytes": self.total_bytes,
            "duration": self.duration,
        }


@dataclass
class DeployResult:
    """Result of a full deploy run"""

    phase: Phase = Phase.START
    phases: List[Phase] = field(default_factory=list)
    publish: Optional[PublishResult] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return self.phase == Phase.SUCCESS

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def enter(self, phase: Phase) -> None:
        """Record a state transition"""
        self.phase = phase
        self.phases.append(phase)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "phase": self.phase.value,
            "phases": [p.value for p in self.phases],
            "publish": self.publish.to_dict() if self.publish else None,
            "error": self.error,
            "error_code": self.error_code,
            "duration": self.duration,
        }
