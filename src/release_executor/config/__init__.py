# release_executor/config/__init__.py
"""Configuration management."""

# Local imports
from .base import ENV_PREFIX, Settings, load_environment_variables
from .pipelines import BUILTIN_PIPELINES, PipelineDefinition, PipelinesConfiguration

__all__ = [
    "ENV_PREFIX",
    "Settings",
    "load_environment_variables",
    "BUILTIN_PIPELINES",
    "PipelineDefinition",
    "PipelinesConfiguration",
]
