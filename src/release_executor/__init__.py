"""
Release executor - named release pipelines of sequential shell steps.

A pipeline is created with a name, steps are appended in order and a
single ``run()`` executes them one after another::

    from release_executor import create

    create("my-lib").add("dev tag").add("sbt publish").run()

The version information is read from the installed package metadata when
available.
"""

from importlib import metadata as importlib_metadata
from importlib.metadata import PackageNotFoundError

from .exceptions import (
    ConfigurationError,
    PipelineNotFoundError,
    ReleaseExecutorError,
    StepExecutionError,
    StepTimeoutError,
    ValidationError,
)
from .execution import (
    ExecutionStatus,
    Executor,
    FailurePolicy,
    PipelineResult,
    ShellCommandRunner,
    StepResult,
    create,
)

__version__ = "0.0.0"

try:
    __version__ = importlib_metadata.version("release-executor")
except PackageNotFoundError:
    pass

__all__ = [
    "__version__",
    "create",
    "Executor",
    "FailurePolicy",
    "ExecutionStatus",
    "PipelineResult",
    "StepResult",
    "ShellCommandRunner",
    "ReleaseExecutorError",
    "StepExecutionError",
    "StepTimeoutError",
    "PipelineNotFoundError",
    "ConfigurationError",
    "ValidationError",
]
