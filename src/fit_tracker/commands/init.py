"""Initialize database command."""

import click

from ..db import init_db, seed_users
from .base import async_command, echo_info, echo_success, get_settings


@click.command()
@click.option("--seed/--no-seed", default=True, help="Create the demo accounts (default: on)")
@click.pass_context
@async_command
async def init(ctx: click.Context, seed: bool):
    """Initialize the fit-tracker database.

    Creates the data directory and the SQLite schema. Running it again is
    harmless: existing tables and accounts are left alone.
    """
    settings = get_settings(ctx)

    echo_info(f"Initializing fit-tracker in {settings.data_dir}")
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.image_dir.mkdir(parents=True, exist_ok=True)

    await init_db(settings.db_path)
    echo_success("Database initialized")

    if seed:
        created = await seed_users(settings.db_path)
        if created:
            echo_success(f"Created {created} demo account(s): admin/admin123, user/user123")
        else:
            echo_info("Demo accounts already present")

    click.echo()
    click.echo("fit-tracker is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  fit-tracker serve              # start the API on http://127.0.0.1:8000")
    click.echo("  fit-tracker users list         # show registered accounts")
