"""
CLI entry point and command registration.
"""

from pathlib import Path
from typing import Optional

import click

from .commands import ListCommand, RunCommand, ShowCommand
from .config import PipelinesConfiguration, Settings, load_environment_variables
from .exceptions import ReleaseExecutorError, StepExecutionError
from .logging import ReleaseLogger


def _fail(error: Exception) -> None:
    if isinstance(error, StepExecutionError):
        error_msg = f"✗ {str(error)}"
        if error.command:
            error_msg += f"\nCommand: {error.command}"
    elif isinstance(error, ReleaseExecutorError):
        error_msg = f"✗ {str(error)}"
    else:
        error_msg = f"✗ Unexpected error: {str(error)}"
    click.secho(error_msg, fg="red", err=True)
    raise click.Abort() from error


def _pipelines(settings: Settings) -> PipelinesConfiguration:
    return PipelinesConfiguration(settings.config)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-dir", type=click.Path(file_okay=False), help="Directory for log files"
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="JSON file with additional pipeline definitions",
)
@click.pass_context
def cli(
    ctx: click.Context,
    debug: bool = False,
    log_dir: Optional[str] = None,
    config_path: Optional[str] = None,
):
    """Release pipeline executor.

    Runs named release pipelines: ordered shell steps executed one at a
    time, stopping at the first failing step.
    """
    load_environment_variables(Path.cwd() / ".env")
    try:
        settings = Settings()
    except ReleaseExecutorError as e:
        _fail(e)

    settings.debug = settings.debug or debug
    if log_dir:
        settings.log_dir = Path(log_dir)
    if config_path:
        settings.config = Path(config_path)

    ReleaseLogger().setup(
        debug=settings.debug,
        log_dir=str(settings.log_dir) if settings.log_dir else None,
    )
    ctx.obj = settings


@cli.command()
@click.argument("pipeline_name")
@click.option("--dry-run", is_flag=True, help="Print the steps without running them")
@click.option(
    "--keep-going", is_flag=True, help="Run the remaining steps after a failure"
)
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False),
    help="Directory to run the steps in",
)
@click.pass_context
def run(
    ctx: click.Context,
    pipeline_name: str,
    dry_run: bool,
    keep_going: bool,
    cwd: Optional[str],
):
    """Run a release pipeline.

    Exits with the status of the first failing step.
    """
    settings: Settings = ctx.obj
    try:
        cmd = RunCommand(settings, _pipelines(settings))
        result = cmd.execute(
            pipeline_name, dry_run=dry_run, keep_going=keep_going, cwd=cwd
        )
    except Exception as e:
        _fail(e)

    if not result.succeeded:
        ctx.exit(result.exit_code)


@cli.command("list")
@click.pass_obj
def list_pipelines(settings: Settings):
    """List available release pipelines."""
    try:
        ListCommand(settings, _pipelines(settings)).execute()
    except Exception as e:
        _fail(e)


@cli.command()
@click.argument("pipeline_name")
@click.pass_obj
def show(settings: Settings, pipeline_name: str):
    """Show the steps of a release pipeline."""
    try:
        ShowCommand(settings, _pipelines(settings)).execute(pipeline_name)
    except Exception as e:
        _fail(e)


def main():
    """Entry point for the release command."""
    cli(prog_name="release")


if __name__ == "__main__":
    main()
