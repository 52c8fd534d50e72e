"""
Custom exceptions for the release executor.
"""

from typing import Optional, Any, Dict


class ReleaseExecutorError(Exception):
    """Base exception for all release executor errors."""

    def __init__(
        self,
        message: str,
        *args: Any,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or "RELEASE_EXECUTOR_ERROR"
        self.context = context or {}
        super().__init__(message, *args)

    def __str__(self) -> str:
        error_msg = f"[{self.error_code}] {self.message}"
        if self.context:
            error_msg += f"\nContext: {self.context}"
        return error_msg


class PipelineNotFoundError(ReleaseExecutorError):
    """Raised when a requested pipeline is not defined."""

    def __init__(self, pipeline_name: str, *args: Any):
        self.pipeline_name = pipeline_name
        super().__init__(
            f"Pipeline '{pipeline_name}' not found",
            *args,
            error_code="PIPELINE_NOT_FOUND",
            context={"pipeline_name": pipeline_name},
        )


class StepExecutionError(ReleaseExecutorError):
    """Error raised when a pipeline step fails."""

    def __init__(
        self,
        command: str,
        exit_code: Optional[int],
        error_output: str,
        pipeline_name: Optional[str] = None,
        step_index: Optional[int] = None,
    ):
        """Initialize with step details.

        Args:
            command: The command that failed
            exit_code: The exit code from the command, None if it never ran
            error_output: Error output from the command
            pipeline_name: Name of the pipeline the step belongs to
            step_index: Zero-based position of the step in the pipeline
        """
        self.command = command
        self.exit_code = exit_code
        self.error_output = error_output
        self.pipeline_name = pipeline_name
        self.step_index = step_index

        message = f"Step failed with exit code {exit_code}"
        if pipeline_name:
            message = f"Pipeline '{pipeline_name}' failed: {message}"
        if error_output:
            message = f"{message}\nError: {error_output}"

        super().__init__(
            message,
            error_code="STEP_EXECUTION_ERROR",
            context={
                "pipeline_name": pipeline_name,
                "step_index": step_index,
                "command": command,
                "exit_code": exit_code,
            },
        )


class StepTimeoutError(ReleaseExecutorError):
    """Raised when a step runs longer than its timeout."""

    def __init__(self, command: str, timeout: float):
        self.command = command
        self.timeout = timeout
        super().__init__(
            f"Step timed out after {timeout} seconds",
            error_code="STEP_TIMEOUT",
            context={"command": command, "timeout": timeout},
        )


class ConfigurationError(ReleaseExecutorError):
    """Raised when there's an error in the configuration."""

    def __init__(self, message: str, *args: Any, config_path: Optional[str] = None):
        super().__init__(
            message,
            *args,
            error_code="CONFIG_ERROR",
            context={"config_path": config_path} if config_path else None,
        )


class ValidationError(ReleaseExecutorError):
    """Raised when validation fails."""

    def __init__(self, message: str, field: str, value: Any, *args: Any):
        self.field = field
        self.value = value
        super().__init__(
            message,
            *args,
            error_code="VALIDATION_ERROR",
            context={"field": field, "value": value},
        )
