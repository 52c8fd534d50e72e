"""Runtime settings loaded from the environment."""

# Standard library imports
import os
import typing
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

# Third-party imports
from dotenv import load_dotenv

# Local imports
from ..exceptions import ConfigurationError, ValidationError
from ..execution import FailurePolicy
from ..logging import ReleaseLogger

ENV_PREFIX = "RELEASE_EXECUTOR_"

logger = ReleaseLogger().get_context_logger(module=__name__)


def load_environment_variables(env_path: Path) -> bool:
    """Load environment variables from a .env file if it exists.

    Variables already set in the process environment win.

    Returns:
        True if the file was found and loaded
    """
    if not env_path.exists():
        return False
    load_dotenv(env_path, override=False)
    logger.debug("Loaded environment from %s", env_path)
    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX):
            logger.debug("Loaded env var: %s=%s", key, value)
    return True


def _unwrap_optional(field_type):
    if typing.get_origin(field_type) is typing.Union:
        args = [arg for arg in typing.get_args(field_type) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return field_type


@dataclass
class Settings:
    """Executor settings.

    Every field can be overridden with a ``RELEASE_EXECUTOR_<FIELD>``
    environment variable, which takes precedence over constructor values.
    """

    debug: bool = field(default=False)
    log_dir: Optional[Path] = field(default=None)
    config: Optional[Path] = field(default=None)
    working_dir: Optional[Path] = field(default=None)
    failure_policy: str = field(default="abort")
    step_timeout: Optional[float] = field(default=None)
    echo_output: bool = field(default=True)

    def __post_init__(self):
        self._load_from_env()
        self._validate()

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        for settings_field in fields(self):
            env_key = f"{ENV_PREFIX}{settings_field.name.upper()}"
            env_value = os.getenv(env_key)
            if env_value is None:
                continue

            # Strip trailing comments and whitespace
            env_value = env_value.split("#")[0].strip()
            if env_value == "":
                setattr(self, settings_field.name, settings_field.default)
                continue

            field_type = _unwrap_optional(settings_field.type)
            try:
                if field_type is bool:
                    value = env_value.lower() in ("true", "1", "yes", "on")
                elif field_type is Path:
                    value = Path(os.path.expanduser(env_value))
                else:
                    value = field_type(env_value)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Invalid value for {env_key}: {env_value} - {str(e)}"
                ) from e

            setattr(self, settings_field.name, value)

    def _validate(self) -> None:
        try:
            self.failure_policy = FailurePolicy.parse(self.failure_policy).value
        except ValidationError as e:
            raise ConfigurationError(
                f"failure_policy must be 'abort' or 'continue', "
                f"got {self.failure_policy!r}"
            ) from e

        if self.step_timeout is not None and self.step_timeout <= 0:
            raise ConfigurationError("step_timeout must be positive")
