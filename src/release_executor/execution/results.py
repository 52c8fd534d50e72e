"""
Result types for step and pipeline execution.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Any


class ExecutionStatus(Enum):
    """Status of a step execution."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class StepResult:
    """Result of running one pipeline step."""

    command: str
    status: ExecutionStatus = ExecutionStatus.PENDING
    index: Optional[int] = None
    exit_code: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    error: Optional[Exception] = None
    dry_run: bool = False

    @property
    def duration(self) -> Optional[float]:
        """Get execution duration in seconds."""
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return None

    @property
    def failed(self) -> bool:
        return self.status is ExecutionStatus.FAILED

    @property
    def error_output(self) -> str:
        """Best available description of why the step failed."""
        if self.stderr:
            return self.stderr.strip()
        if self.stdout:
            return self.stdout.strip()
        if self.error is not None:
            return str(self.error)
        return ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "command": self.command,
            "index": self.index,
            "status": self.status.value,
            "exit_code": self.exit_code,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": self.duration,
            "error": str(self.error) if self.error else None,
            "dry_run": self.dry_run,
        }


@dataclass
class PipelineResult:
    """Result of running a whole pipeline."""

    name: str
    steps: List[StepResult] = field(default_factory=list)
    start_time: Optional[float] = None
    end_time: Optional[float] = None

    @property
    def failed_steps(self) -> List[StepResult]:
        return [step for step in self.steps if step.failed]

    @property
    def executed_steps(self) -> List[StepResult]:
        return [
            step for step in self.steps if step.status is not ExecutionStatus.SKIPPED
        ]

    @property
    def first_failure(self) -> Optional[StepResult]:
        failed = self.failed_steps
        return failed[0] if failed else None

    @property
    def succeeded(self) -> bool:
        return not self.failed_steps

    @property
    def exit_code(self) -> int:
        """Process exit status for this result.

        Zero on success, otherwise the exit status of the first failed
        step, falling back to 1 when that status is unusable.
        """
        failure = self.first_failure
        if failure is None:
            return 0
        if failure.exit_code is not None and failure.exit_code > 0:
            return failure.exit_code
        return 1

    @property
    def duration(self) -> Optional[float]:
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "succeeded": self.succeeded,
            "exit_code": self.exit_code,
            "duration": self.duration,
            "steps": [step.to_dict() for step in self.steps],
        }
