"""CLI entry point for fit-tracker."""

import click

from . import __version__
from .commands import challenges, init, serve, users
from .config import Settings, configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="fit-tracker")
@click.option("--log-level", default=None, help="Logging level (default: FIT_TRACKER_LOG_LEVEL or INFO)")
@click.pass_context
def main(ctx: click.Context, log_level: str | None):
    """fit-tracker: daily fitness records, routines and shareable challenges.

    Example usage:

        # Create the database with demo accounts
        fit-tracker init

        # Run the HTTP API
        fit-tracker serve --port 8000

        # Check a challenge from the terminal
        fit-tracker challenges list 1
        fit-tracker challenges status 3
    """
    settings = Settings.from_env()
    if log_level:
        settings.log_level = log_level.upper()
    configure_logging(settings.log_level)
    ctx.obj = settings


main.add_command(init)
main.add_command(serve)
main.add_command(users)
main.add_command(challenges)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
