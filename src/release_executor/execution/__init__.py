"""
Pipeline execution package.
"""

from .executor import CommandRunner, Executor, FailurePolicy, create
from .results import ExecutionStatus, PipelineResult, StepResult
from .runner import ShellCommandRunner

__all__ = [
    "CommandRunner",
    "Executor",
    "FailurePolicy",
    "create",
    "ExecutionStatus",
    "PipelineResult",
    "StepResult",
    "ShellCommandRunner",
]
