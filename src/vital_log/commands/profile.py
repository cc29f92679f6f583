"""Profile commands."""

import click

from ..config import get_config
from ..models.profile import Theme, UnitSystem, UserProfile
from .base import async_command, echo_error, echo_info, echo_success, ensure_initialized, load_tracker


@click.group()
@click.pass_context
def profile(ctx):
    """Show or edit the user profile."""
    ensure_initialized(ctx)


@profile.command()
@async_command
async def show():
    """Show the profile."""
    tracker = await load_tracker()
    if tracker.profile is None:
        echo_info("No profile yet. Create one with 'vital-log profile set --email you@example.com'")
        return
    click.echo()
    click.echo(tracker.profile.get_summary())


@profile.command(name="set")
@click.option("--email", default=None, help="Account email (required for a new profile)")
@click.option("--name", "display_name", default=None, help="Display name")
@click.option("--units", type=click.Choice([u.value for u in UnitSystem]), default=None)
@click.option("--theme", type=click.Choice([t.value for t in Theme]), default=None)
@click.option("--reminder", default=None, help="Daily reminder time (HH:MM)")
@click.option("--notifications/--no-notifications", default=None)
@click.pass_context
@async_command
async def set_profile(ctx, email, display_name, units, theme, reminder, notifications):
    """Create or update the profile."""
    tracker = await load_tracker()
    current = tracker.profile

    if current is None:
        if not email:
            echo_error("--email is required to create a profile")
            ctx.exit(1)
        current = UserProfile(id=get_config().sync.user_id, email=email)

    if email:
        current.email = email
    if display_name is not None:
        current.display_name = display_name
    if units:
        current.preferences.units = UnitSystem(units)
    if theme:
        current.preferences.theme = Theme(theme)
    if reminder is not None:
        current.preferences.reminder_time = reminder or None
    if notifications is not None:
        current.preferences.notifications_enabled = notifications

    await tracker.set_profile(current)
    echo_success("Profile saved")
