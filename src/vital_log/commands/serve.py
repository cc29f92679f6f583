"""Sync server command."""

import click

from ..config import get_config


@click.command()
@click.option("--host", default=None, help="Host to bind to (default: VITAL_LOG_SERVER_HOST or 127.0.0.1)")
@click.option("--port", "-p", default=None, type=int, help="Port to bind to (default: VITAL_LOG_SERVER_PORT or 8000)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(host: str | None, port: int | None, reload: bool):
    """Start the sync server.

    Devices point VITAL_LOG_REMOTE_URL at this server to push and pull their
    history. Set VITAL_LOG_SERVER_TOKEN to require a bearer token.

    Examples:

        # Start on default port (8000)
        vital-log serve

        # Expose to the network
        vital-log serve --host 0.0.0.0
    """
    import uvicorn

    from ..web import create_app

    server = get_config().server
    host = host or server.host
    port = port or server.port

    click.echo()
    click.echo(click.style("Starting vital-log sync server...", fg="green"))
    click.echo()
    click.echo(f"  Local:   http://{host}:{port}")
    if server.token is None:
        click.echo(click.style("  Warning: no VITAL_LOG_SERVER_TOKEN set; the server is open", fg="yellow"))
    click.echo()
    click.echo("Press Ctrl+C to stop the server.")
    click.echo()

    uvicorn.run(
        "vital_log.web:create_app" if reload else create_app(),
        host=host,
        port=port,
        reload=reload,
        factory=reload,
    )
