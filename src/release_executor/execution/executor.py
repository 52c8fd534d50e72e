"""
Sequential release pipeline executor.
"""

import time
from enum import Enum
from typing import List, Optional, Protocol, Tuple, Union

from ..exceptions import StepExecutionError, ValidationError
from ..logging import ReleaseLogger
from .results import ExecutionStatus, PipelineResult, StepResult
from .runner import ShellCommandRunner


class FailurePolicy(Enum):
    """What a pipeline does after a step fails."""

    ABORT = "abort"
    CONTINUE = "continue"

    @classmethod
    def parse(cls, value: Union[str, "FailurePolicy"]) -> "FailurePolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(
                f"Unknown failure policy: {value!r}",
                field="failure_policy",
                value=value,
            ) from None


class CommandRunner(Protocol):
    """Anything able to run one command string to completion."""

    def run(self, command: str) -> StepResult: ...


class Executor:
    """A named, ordered list of shell steps run one after another.

    Steps are appended with :meth:`add`, which returns the executor so
    calls can be chained::

        Executor.create("my-lib").add("dev tag").add("sbt publish").run()
    """

    def __init__(
        self,
        name: str,
        runner: Optional[CommandRunner] = None,
        failure_policy: Union[str, FailurePolicy] = FailurePolicy.ABORT,
        dry_run: bool = False,
    ):
        self._name = name
        self._steps: List[str] = []
        self.runner = runner or ShellCommandRunner()
        self.failure_policy = FailurePolicy.parse(failure_policy)
        self.dry_run = dry_run
        self.logger = ReleaseLogger().get_context_logger(
            executor_class=self.__class__.__name__, pipeline=name
        )

    @classmethod
    def create(cls, name: str, **kwargs) -> "Executor":
        """Create an empty pipeline with the given name."""
        return cls(name, **kwargs)

    @property
    def name(self) -> str:
        return self._name

    @property
    def steps(self) -> Tuple[str, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"Executor(name={self._name!r}, steps={len(self._steps)})"

    def add(self, step: str) -> "Executor":
        """Append a step and return this executor.

        Raises:
            ValidationError: If the step is not a string
        """
        if not isinstance(step, str):
            raise ValidationError(
                "Pipeline step must be a string", field="step", value=step
            )
        self._steps.append(step)
        self.logger.debug("Added step %d: %s", len(self._steps), step)
        return self

    def _run_step(self, index: int, command: str) -> StepResult:
        if self.dry_run:
            self.logger.info("[dry-run] %s", command)
            now = time.time()
            return StepResult(
                command=command,
                status=ExecutionStatus.COMPLETED,
                index=index,
                exit_code=0,
                start_time=now,
                end_time=now,
                dry_run=True,
            )
        result = self.runner.run(command)
        result.index = index
        return result

    def run(self, raise_on_failure: bool = False) -> PipelineResult:
        """Run every step in order, each to completion before the next.

        With the ``abort`` policy the first failed step stops the pipeline
        and the steps after it are reported as skipped. With ``continue``
        every step runs regardless of earlier failures.

        Args:
            raise_on_failure: Raise instead of returning a failed result

        Returns:
            PipelineResult: One entry per step, in step order

        Raises:
            StepExecutionError: If a step failed and ``raise_on_failure`` is set
        """
        steps = list(self._steps)
        result = PipelineResult(name=self._name, start_time=time.time())
        self.logger.info(
            "Running pipeline %s (%d steps)",
            self._name,
            len(steps),
            extra={
                "failure_policy": self.failure_policy.value,
                "dry_run": self.dry_run,
            },
        )

        aborted = False
        for index, command in enumerate(steps):
            if aborted:
                result.steps.append(
                    StepResult(
                        command=command, status=ExecutionStatus.SKIPPED, index=index
                    )
                )
                continue

            self.logger.info("Step %d/%d: %s", index + 1, len(steps), command)
            step_result = self._run_step(index, command)
            result.steps.append(step_result)

            if step_result.failed:
                self.logger.error(
                    "Step failed: %s",
                    command,
                    extra={
                        "exit_code": step_result.exit_code,
                        "error_output": step_result.error_output,
                    },
                )
                if self.failure_policy is FailurePolicy.ABORT:
                    aborted = True
            else:
                self.logger.info(
                    "Step %d/%d finished: exit code %s in %.2fs",
                    index + 1,
                    len(steps),
                    step_result.exit_code,
                    step_result.duration or 0.0,
                    extra={"command": command},
                )

        result.end_time = time.time()

        if result.succeeded:
            self.logger.info("Pipeline %s completed", self._name)
        else:
            self.logger.error(
                "Pipeline %s failed (%d of %d steps failed)",
                self._name,
                len(result.failed_steps),
                len(steps),
            )
            if raise_on_failure:
                raise self._failure_error(result)

        return result

    def run_or_raise(self) -> PipelineResult:
        """Run the pipeline, raising StepExecutionError on the first failure."""
        return self.run(raise_on_failure=True)

    def _failure_error(self, result: PipelineResult) -> StepExecutionError:
        failure = result.first_failure
        error = StepExecutionError(
            command=failure.command,
            exit_code=failure.exit_code,
            error_output=failure.error_output,
            pipeline_name=self._name,
            step_index=failure.index,
        )
        error.__cause__ = failure.error
        return error


def create(name: str, **kwargs) -> Executor:
    """Create an empty pipeline with the given name."""
    return Executor.create(name, **kwargs)
