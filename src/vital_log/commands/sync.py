"""Sync commands."""

import click

from ..config import get_config
from ..services.sync import SyncService
from ..store import LocalStore, create_remote_store
from .base import async_command, echo_error, echo_info, echo_success, ensure_initialized


def _build_service(ctx: click.Context) -> SyncService:
    config = get_config()
    try:
        remote = create_remote_store(config.sync)
    except ValueError as e:
        echo_error(str(e))
        ctx.exit(1)
    return SyncService(LocalStore(config.storage.db_path), remote, config.sync)


@click.group()
@click.pass_context
def sync(ctx):
    """Push or pull history to or from the sync server.

    Whole collections are replaced; the last writer wins.
    """
    ensure_initialized(ctx)


@sync.command()
@click.pass_context
@async_command
async def push(ctx):
    """Replace the remote history with the local one."""
    service = _build_service(ctx)
    echo_info(f"Pushing to {service.config.remote_url} as {service.config.user_id}")
    if not await service.push_all():
        echo_error(f"Push failed: {service.state.last_error}")
        ctx.exit(1)
    echo_success("Push complete")


@sync.command()
@click.pass_context
@async_command
async def pull(ctx):
    """Replace the local history with the remote one."""
    service = _build_service(ctx)
    echo_info(f"Pulling from {service.config.remote_url} as {service.config.user_id}")
    if not await service.pull_all():
        echo_error(f"Pull failed: {service.state.last_error}. Local data was not changed")
        ctx.exit(1)
    echo_success("Pull complete")
