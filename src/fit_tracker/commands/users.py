"""User account commands."""

import click

from ..db import UserRepository
from .base import async_command, echo_info, ensure_initialized, format_table


@click.group()
@click.pass_context
def users(ctx):
    """Inspect user accounts."""
    ensure_initialized(ctx)


@users.command(name="list")
@click.pass_context
@async_command
async def list_users(ctx):
    """List all registered users."""
    settings = ensure_initialized(ctx)
    all_users = await UserRepository(settings.db_path).list_all()

    if not all_users:
        echo_info("No users found. Run 'fit-tracker init' to create the demo accounts")
        return

    headers = ["ID", "Username", "Name", "Email", "Created"]
    rows = []
    for user in all_users:
        created = user.created_at.strftime("%Y-%m-%d") if user.created_at else "N/A"
        rows.append([str(user.id), user.username, user.name or "", user.email or "", created])

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(all_users)} user(s)")
