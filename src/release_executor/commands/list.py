"""
List and inspect release pipelines.
"""

import click

from .base import ReleaseCommand


class ListCommand(ReleaseCommand):
    """Command to list available release pipelines."""

    def execute(self) -> bool:
        """Execute list command.

        Returns:
            bool: True if any pipeline is defined
        """
        pipelines = self.pipelines.list_pipelines()
        if not pipelines:
            click.echo("No pipelines configured.")
            return False

        click.secho("\n  Available Pipelines:", fg="blue", bold=True)
        click.echo()

        max_name_length = max(len(name) for name in pipelines)
        for name, definition in pipelines.items():
            click.secho(
                f"    {name:<{max_name_length}}  ", fg="green", bold=True, nl=False
            )
            click.echo(definition.description or "No description available")
            click.secho("    steps:  ", dim=True, nl=False)
            click.echo(str(len(definition.steps)))

        click.echo()
        return True


class ShowCommand(ReleaseCommand):
    """Command to print the steps of one pipeline."""

    def execute(self, pipeline_name: str) -> bool:
        definition = self.pipelines.get_pipeline(pipeline_name)

        click.echo()
        click.secho("  Pipeline: ", fg="blue", bold=True, nl=False)
        click.secho(definition.name, fg="green", bold=True)
        if definition.description:
            click.secho("  Description: ", fg="blue", nl=False)
            click.echo(definition.description)
        click.echo()

        if not definition.steps:
            click.echo("    (no steps)")
        for position, step in enumerate(definition.steps, start=1):
            click.echo(f"    {position}. {step}")

        click.echo()
        return True
