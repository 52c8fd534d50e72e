"""
Release pipeline definitions.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from ..exceptions import ConfigurationError, PipelineNotFoundError, ValidationError
from ..execution import Executor
from ..logging import ReleaseLogger

# Built-in release pipelines, keyed by pipeline name
BUILTIN_PIPELINES: Dict[str, Dict[str, Any]] = {
    "apibuilder-validation": {
        "description": "Tag and cross-publish apibuilder-validation",
        "steps": ["dev tag", "sbt +publish"],
    },
    "lib-apidoc-json-validation": {
        "description": "Tag and publish lib-apidoc-json-validation",
        "steps": ["dev tag", "sbt publish"],
    },
}


@dataclass
class PipelineDefinition:
    """Configuration for a release pipeline.

    Attributes:
        name: Pipeline name
        steps: Shell commands, in execution order
        description: Description of what the pipeline releases
    """

    name: str
    steps: List[str] = field(default_factory=list)
    description: str = ""

    def build(self, **executor_options) -> Executor:
        """Create an executor holding this definition's steps."""
        executor = Executor.create(self.name, **executor_options)
        for step in self.steps:
            executor = executor.add(step)
        return executor


class PipelinesConfiguration:
    """Manages the table of release pipelines."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration.

        Args:
            config_path: Optional JSON file whose pipelines extend or
                replace the built-in ones
        """
        self.logger = ReleaseLogger().get_context_logger(
            config_class=self.__class__.__name__
        )
        self.config_path = Path(config_path) if config_path else None
        self._config: Dict[str, Dict[str, Any]] = {}
        self.load_default_config()
        if self.config_path is not None:
            self._load_config()

    def load_default_config(self) -> None:
        """Load the built-in pipelines."""
        for name, definition in BUILTIN_PIPELINES.items():
            self._config[name] = {
                "description": definition["description"],
                "steps": list(definition["steps"]),
            }

    def _load_config(self) -> None:
        """Load pipelines from the configuration file.

        Raises:
            ConfigurationError: If the file cannot be read or is invalid
        """
        config_path = str(self.config_path)
        if not self.config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                config_path=config_path,
            )

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in configuration file: {str(e)}",
                config_path=config_path,
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to load configuration: {str(e)}", config_path=config_path
            ) from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(
                "Configuration file must contain a JSON object",
                config_path=config_path,
            )

        for name, definition in loaded.items():
            self.validate_definition(name, definition)
            self._config[name] = {
                "description": definition.get("description", ""),
                "steps": list(definition["steps"]),
            }

        self.logger.debug(
            "Loaded configuration from %s",
            config_path,
            extra={"pipelines": sorted(loaded)},
        )

    def validate_definition(self, name: Any, definition: Any) -> bool:
        """Validate a pipeline definition.

        Returns:
            True if the definition is valid

        Raises:
            ValidationError: If the definition is invalid
        """
        if not isinstance(name, str) or not name:
            raise ValidationError(
                "Pipeline name must be a non-empty string", field="name", value=name
            )

        if not isinstance(definition, dict):
            raise ValidationError(
                f"Definition of pipeline '{name}' must be an object",
                field=name,
                value=definition,
            )

        if "steps" not in definition:
            raise ValidationError(
                f"Pipeline '{name}' has no steps field",
                field=f"{name}.steps",
                value=None,
            )

        steps = definition["steps"]
        if not isinstance(steps, list) or not all(isinstance(s, str) for s in steps):
            raise ValidationError(
                f"Steps of pipeline '{name}' must be a list of strings",
                field=f"{name}.steps",
                value=steps,
            )

        description = definition.get("description", "")
        if not isinstance(description, str):
            raise ValidationError(
                f"Description of pipeline '{name}' must be a string",
                field=f"{name}.description",
                value=description,
            )

        return True

    def list_pipelines(self) -> Dict[str, PipelineDefinition]:
        """List all pipelines, sorted by name."""
        return {name: self.get_pipeline(name) for name in sorted(self._config)}

    def get_pipeline(self, name: str) -> PipelineDefinition:
        """Get a pipeline definition by name.

        Raises:
            PipelineNotFoundError: If no pipeline has this name
        """
        definition = self._config.get(name)
        if definition is None:
            self.logger.debug("No pipeline named: %s", name)
            raise PipelineNotFoundError(name)
        return PipelineDefinition(
            name=name,
            steps=list(definition["steps"]),
            description=definition["description"],
        )

    def build_executor(self, name: str, **executor_options) -> Executor:
        """Create an executor for the named pipeline."""
        return self.get_pipeline(name).build(**executor_options)
