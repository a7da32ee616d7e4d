"""Web server command."""

import click

from .base import echo_warning, ensure_initialized


@click.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", "-p", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, reload: bool):
    """Start the API server.

    Examples:

        # Start on default port (8000)
        fit-tracker serve

        # Expose to network (all interfaces)
        fit-tracker serve --host 0.0.0.0

        # Development mode with auto-reload
        fit-tracker serve --reload
    """
    settings = ensure_initialized(ctx)

    import uvicorn

    from ..web import create_app

    click.echo()
    click.echo(click.style("Starting fit-tracker API server...", fg="green"))
    click.echo()
    click.echo(f"  Local:    http://{host}:{port}")
    click.echo(f"  Database: {settings.db_path}")
    if settings.dev_default_user is not None:
        echo_warning(f"Requests without X-User-Id act as user {settings.dev_default_user}")
    click.echo()
    click.echo("Press Ctrl+C to stop the server.")
    click.echo()

    # The reloader imports the factory itself and reads settings from the environment
    uvicorn.run(
        "fit_tracker.web:create_app" if reload else create_app(settings),
        host=host,
        port=port,
        reload=reload,
        factory=reload,
        log_level=settings.log_level.lower(),
    )
