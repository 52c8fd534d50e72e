# Standard library imports
import os
from typing import List, Optional

# Third-party imports
import pytest

# Local/package imports
from release_executor.execution import ExecutionStatus, StepResult
from release_executor.logging import ReleaseLogger


class RecordingRunner:
    """Command runner stub that records calls instead of spawning processes."""

    def __init__(self, fail_on: Optional[dict] = None):
        # command -> exit code to report for that command
        self.fail_on = fail_on or {}
        self.calls: List[str] = []
        self.active = 0
        self.max_active = 0

    def run(self, command: str) -> StepResult:
        self.calls.append(command)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            exit_code = self.fail_on.get(command, 0)
            return StepResult(
                command=command,
                status=(
                    ExecutionStatus.COMPLETED
                    if exit_code == 0
                    else ExecutionStatus.FAILED
                ),
                exit_code=exit_code,
                stderr="boom" if exit_code else "",
                start_time=0.0,
                end_time=0.0,
            )
        finally:
            self.active -= 1


@pytest.fixture
def recording_runner():
    """Runner stub where every command succeeds."""
    return RecordingRunner()


@pytest.fixture
def failing_runner():
    """Factory for runner stubs failing the given commands."""

    def _make(fail_on):
        return RecordingRunner(fail_on=fail_on)

    return _make


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep RELEASE_EXECUTOR_* variables from the outer shell out of tests."""
    for key in list(os.environ):
        if key.startswith("RELEASE_EXECUTOR_"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by the CLI so each test starts fresh."""
    yield
    ReleaseLogger().reset()
