"""Challenge inspection commands."""

from datetime import date

import click

from ..db import ChallengeRepository, ExerciseRecordRepository
from ..models.progress import METRICS
from ..services.progress import build_owner_progress, index_by_date, target_for
from .base import async_command, echo_error, echo_info, ensure_initialized, format_table


def _fmt(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.1f}"
    return str(value)


@click.group()
@click.pass_context
def challenges(ctx):
    """Inspect challenges and their progress."""
    ensure_initialized(ctx)


@challenges.command(name="list")
@click.argument("user_id", type=int)
@click.pass_context
@async_command
async def list_challenges(ctx, user_id: int):
    """List the challenges owned by USER_ID."""
    settings = ensure_initialized(ctx)
    owned = await ChallengeRepository(settings.db_path).list_by_user(user_id)

    if not owned:
        echo_info(f"User {user_id} has no challenges")
        return

    today = date.today()
    headers = ["ID", "Name", "Start", "End", "Active"]
    rows = [
        [
            str(c.id),
            c.name[:30] + "..." if len(c.name) > 30 else c.name,
            c.start_date.isoformat(),
            c.end_date.isoformat(),
            "yes" if c.is_active(today) else "no",
        ]
        for c in owned
    ]

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(owned)} challenge(s)")


@challenges.command()
@click.argument("challenge_id", type=int)
@click.option("--daily", "-d", is_flag=True, help="Also show each recorded day")
@click.pass_context
@async_command
async def status(ctx, challenge_id: int, daily: bool):
    """Show the owner's progress on CHALLENGE_ID."""
    settings = ensure_initialized(ctx)

    challenge = await ChallengeRepository(settings.db_path).get(challenge_id)
    if not challenge:
        echo_error(f"Challenge ID {challenge_id} not found")
        ctx.exit(1)

    records = await ExerciseRecordRepository(settings.db_path).list_between(
        challenge.user_id, challenge.start_date, challenge.end_date
    )
    today = date.today()
    progress = build_owner_progress(challenge, index_by_date(records), today)

    click.echo()
    click.echo("=" * 60)
    click.echo(f"Challenge: {challenge.name} (ID: {challenge.id})")
    click.echo("=" * 60)
    click.echo(f"Owner:  user {challenge.user_id}")
    click.echo(f"Range:  {challenge.start_date} to {challenge.end_date}")
    click.echo(f"Active: {'yes' if challenge.is_active(today) else 'no'}")
    click.echo(f"Recorded days: {progress.overall.total_days}")
    click.echo()

    headers = ["Metric", "Target", "Success", "Recorded", "Rate"]
    rows = []
    for metric in METRICS:
        summary = progress.overall.metric(metric.name)
        rows.append([
            metric.name,
            _fmt(target_for(challenge, metric)),
            str(summary.success_count),
            str(summary.recorded_days),
            f"{summary.success_rate:.1f}%",
        ])
    click.echo(format_table(headers, rows))

    if daily and progress.daily:
        click.echo()
        headers = ["Date"] + [m.name for m in METRICS]
        rows = [
            [entry.date.isoformat()] + [_fmt(entry.values[m.field]) for m in METRICS]
            for entry in progress.daily
        ]
        click.echo(format_table(headers, rows))
