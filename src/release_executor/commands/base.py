"""
Base command class for the release CLI."""

from abc import ABC, abstractmethod
from typing import Optional

from release_executor.config import PipelinesConfiguration, Settings
from release_executor.logging import ReleaseLogger


class ReleaseCommand(ABC):
    """Base command class."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        pipelines: Optional[PipelinesConfiguration] = None,
    ):
        self.logger = ReleaseLogger().get_context_logger(
            command_class=self.__class__.__name__
        )
        self.settings = settings or Settings()
        self.pipelines = pipelines or PipelinesConfiguration(self.settings.config)

    @abstractmethod
    def execute(self, *args, **kwargs):
        """Execute the command."""
        raise NotImplementedError("Subclasses must implement execute()")
