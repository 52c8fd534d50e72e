"""
Run command implementation for executing release pipelines.
"""

from pathlib import Path
from typing import Optional, Union

import click

from ..execution import (
    ExecutionStatus,
    FailurePolicy,
    PipelineResult,
    ShellCommandRunner,
)
from .base import ReleaseCommand


class RunCommand(ReleaseCommand):
    """Command for running a release pipeline."""

    def execute(
        self,
        pipeline_name: str,
        dry_run: bool = False,
        keep_going: bool = False,
        cwd: Optional[Union[str, Path]] = None,
    ) -> PipelineResult:
        """Run a release pipeline.

        Args:
            pipeline_name: Name of the pipeline to run
            dry_run: Print the steps without executing them
            keep_going: Run every step even after a failure
            cwd: Directory the steps run in

        Returns:
            PipelineResult: Outcome of every step

        Raises:
            PipelineNotFoundError: If the pipeline is not defined
        """
        definition = self.pipelines.get_pipeline(pipeline_name)
        failure_policy = (
            FailurePolicy.CONTINUE
            if keep_going
            else FailurePolicy.parse(self.settings.failure_policy)
        )
        runner = ShellCommandRunner(
            working_dir=cwd or self.settings.working_dir,
            timeout=self.settings.step_timeout,
            echo_output=self.settings.echo_output,
        )
        executor = definition.build(
            runner=runner, failure_policy=failure_policy, dry_run=dry_run
        )

        click.echo()
        click.secho("  Running: ", fg="blue", bold=True, nl=False)
        click.secho(executor.name, fg="green", bold=True)
        if definition.description:
            click.secho("  Description: ", fg="blue", nl=False)
            click.echo(definition.description)
        click.echo()

        result = executor.run()
        self._print_summary(result)
        return result

    def _print_summary(self, result: PipelineResult) -> None:
        click.echo()
        for step in result.steps:
            if step.dry_run:
                marker, color = "-", "blue"
            elif step.failed:
                marker, color = "✗", "red"
            elif step.status is ExecutionStatus.SKIPPED:
                marker, color = "·", "yellow"
            else:
                marker, color = "✓", "green"
            click.secho(f"  {marker} ", fg=color, nl=False)
            click.echo(f"{step.command}  [{step.status.value}]")

        click.echo()
        if result.succeeded:
            click.secho(
                f"  ✓ Pipeline '{result.name}' completed successfully", fg="green"
            )
        else:
            failure = result.first_failure
            click.secho(
                f"  ✗ Pipeline '{result.name}' failed at '{failure.command}' "
                f"(exit status {failure.exit_code})",
                fg="red",
                err=True,
            )
