"""mangafas CLI: moderation console for the manga site."""

import sys

import click
from rich.console import Console
from rich.table import Table

from mangafas import __version__
from mangafas.auth.models import Role

console = Console()


def _platform(ctx: click.Context):
    from mangafas.platform import Platform

    if "platform" not in ctx.obj:
        ctx.obj["platform"] = Platform(data_dir=ctx.obj.get("data_dir"))
    return ctx.obj["platform"]


def _actor(platform, user_id: str):
    user = platform.user(user_id)
    if user is None:
        console.print(f"[red]Unknown user:[/] {user_id}")
        sys.exit(1)
    return user


def _outcome(ok: bool, success: str, failure: str) -> None:
    if ok:
        console.print(f"[green]{success}[/]")
    else:
        console.print(f"[red]{failure}[/]")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--data-dir", default=None, help="Data directory (default: $MANGAFAS_HOME or ~/.mangafas)")
@click.pass_context
def main(ctx: click.Context, data_dir: str | None):
    """mangafas: trust and content-lifecycle engine.

    Manage ranks, bans, the submission queue, reports and inboxes from the
    command line.  Commands that act on behalf of someone take
    ``--as USER_ID``.
    """
    from mangafas.config import get_settings
    from mangafas.log import configure_logging

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir


@main.command()
@click.pass_context
def init(ctx: click.Context):
    """Seed the owner account if the site has no administrator."""
    platform = _platform(ctx)
    owner = platform.accounts.ensure_owner()
    if owner is None:
        console.print("[dim]An administrator already exists.[/]")
    else:
        console.print(f"[green]Owner account ready:[/] {owner.id} ({owner.email})")


# ── Users ────────────────────────────────────────────────────────────


@main.group()
def users():
    """List, register and re-rank users."""


@users.command("list")
@click.option("--role", type=click.Choice([r.value for r in Role]), default=None, help="Only users with this role")
@click.option("--search", "query", default=None, help="Match display name or email")
@click.pass_context
def users_list(ctx: click.Context, role: str | None, query: str | None):
    """List registered users."""
    platform = _platform(ctx)
    if query:
        found = platform.users.search(query)
    else:
        found = platform.users.list_users()
    if role:
        found = [u for u in found if u.role == Role(role)]

    if not found:
        console.print("[yellow]No users found.[/]")
        return

    table = Table(title=f"Users ({len(found)})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Email")
    table.add_column("Role", style="green")
    table.add_column("Unread", justify="right")
    for u in sorted(found, key=lambda u: u.role.level, reverse=True):
        table.add_row(u.id, u.display_name, u.email, u.role.label, str(platform.notifications.unread_count(u.id)))
    console.print(table)


@users.command("register")
@click.argument("display_name")
@click.argument("email")
@click.pass_context
def users_register(ctx: click.Context, display_name: str, email: str):
    """Register a new member account."""
    platform = _platform(ctx)
    user = platform.accounts.register(display_name, email)
    if user is None:
        console.print(f"[red]Could not register {email}[/] (email taken or blank fields)")
        sys.exit(1)
    console.print(f"[green]Registered[/] {user.display_name} as {user.id}")


@users.command("set-role")
@click.argument("user_id")
@click.argument("role", type=click.Choice([r.value for r in Role]))
@click.option("--as", "actor_id", required=True, help="Acting administrator id")
@click.pass_context
def users_set_role(ctx: click.Context, user_id: str, role: str, actor_id: str):
    """Change USER_ID's rank to ROLE."""
    platform = _platform(ctx)
    actor = _actor(platform, actor_id)
    updated = platform.accounts.change_role(user_id, role, actor)
    _outcome(updated is not None, f"{user_id} is now {role}", "Role change refused")


@users.command("delete")
@click.argument("user_id")
@click.option("--as", "actor_id", required=True, help="Acting administrator id")
@click.pass_context
def users_delete(ctx: click.Context, user_id: str, actor_id: str):
    """Delete USER_ID and clean up their data."""
    platform = _platform(ctx)
    actor = _actor(platform, actor_id)
    _outcome(platform.accounts.delete_user(user_id, actor), f"Deleted {user_id}", "Delete refused")


@users.command("stats")
@click.argument("user_id")
@click.pass_context
def users_stats(ctx: click.Context, user_id: str):
    """Show USER_ID's favorites, reading, comment and upload counts."""
    platform = _platform(ctx)
    stats = platform.accounts.user_stats(user_id)
    if stats is None:
        console.print(f"[red]Unknown user:[/] {user_id}")
        sys.exit(1)

    table = Table(title=f"Stats for {user_id}")
    table.add_column("Counter", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Favorites", str(stats.favorites))
    table.add_row("Chapters in history", str(stats.reading_history))
    table.add_row("Titles read", str(stats.titles_read))
    table.add_row("Comments written", str(stats.comments_written))
    table.add_row("Titles uploaded", str(stats.titles_uploaded))
    table.add_row("Chapters uploaded", str(stats.chapters_uploaded))
    table.add_row("Awaiting review", str(stats.submissions_pending))
    console.print(table)


# ── Suspensions ──────────────────────────────────────────────────────


@main.command()
@click.argument("user_id")
@click.option("--reason", "-r", required=True, help="Reason shown to the user")
@click.option("--days", type=int, default=None, help="Length of a temporary ban")
@click.option("--permanent", is_flag=True, help="Ban without expiry")
@click.option("--comments-only", is_flag=True, help="Ban from commenting instead of the whole site")
@click.option("--as", "actor_id", required=True, help="Acting moderator id")
@click.pass_context
def ban(ctx: click.Context, user_id: str, reason: str, days: int | None, permanent: bool,
        comments_only: bool, actor_id: str):
    """Suspend USER_ID from the site (or from commenting)."""
    platform = _platform(ctx)
    actor = _actor(platform, actor_id)
    kind = "comment" if comments_only else "site"
    duration = "permanent" if permanent else "temporary"
    suspension = platform.suspensions.issue(user_id, actor, reason, duration, days=days, kind=kind)
    if suspension is None:
        console.print("[red]Ban refused[/] (missing rights, bad input, or already banned)")
        sys.exit(1)
    until = suspension.expires_at or "permanent"
    console.print(f"[green]{kind} ban {suspension.id} issued to {user_id}[/] until {until}")


@main.command()
@click.argument("user_id")
@click.option("--comments-only", is_flag=True, help="Lift the comment ban instead of the site ban")
@click.option("--as", "actor_id", required=True, help="Acting moderator id")
@click.pass_context
def unban(ctx: click.Context, user_id: str, comments_only: bool, actor_id: str):
    """Lift USER_ID's active ban."""
    platform = _platform(ctx)
    actor = _actor(platform, actor_id)
    kind = "comment" if comments_only else "site"
    _outcome(platform.suspensions.lift(user_id, actor, kind), f"Lifted {kind} ban for {user_id}", "No active ban lifted")


@main.command()
@click.option("--kind", type=click.Choice(["site", "comment"]), default=None)
@click.pass_context
def bans(ctx: click.Context, kind: str | None):
    """Show active suspensions."""
    platform = _platform(ctx)
    active = platform.suspensions.list_active(kind)
    if not active:
        console.print("[green]No active suspensions.[/]")
        return

    table = Table(title=f"Active suspensions ({len(active)})")
    table.add_column("ID", style="dim")
    table.add_column("User", style="cyan")
    table.add_column("Kind")
    table.add_column("Expires")
    table.add_column("Issued by")
    table.add_column("Reason")
    for s in active:
        table.add_row(s.id, s.user_id, s.kind.value, s.expires_at or "never", s.issued_by, s.reason[:50])
    console.print(table)


# ── Submissions ──────────────────────────────────────────────────────


@main.group()
def pending():
    """Review queued title and chapter submissions."""


@pending.command("list")
@click.pass_context
def pending_list(ctx: click.Context):
    """List submissions awaiting review."""
    platform = _platform(ctx)
    items = platform.content.list_pending()
    if not items:
        console.print("[green]Nothing awaiting review.[/]")
        return

    table = Table(title=f"Pending submissions ({len(items)})")
    table.add_column("ID", style="dim")
    table.add_column("Kind")
    table.add_column("Name", style="cyan")
    table.add_column("Submitted by")
    table.add_column("Submitted at")
    for item in items:
        table.add_row(item.id, item.kind.value, item.display_name, item.submitted_by, item.submitted_at)
    console.print(table)


@pending.command("approve")
@click.argument("pending_id")
@click.option("--notes", default=None)
@click.option("--as", "actor_id", required=True, help="Acting administrator id")
@click.pass_context
def pending_approve(ctx: click.Context, pending_id: str, notes: str | None, actor_id: str):
    """Approve and publish PENDING_ID."""
    platform = _platform(ctx)
    actor = _actor(platform, actor_id)
    _outcome(platform.content.approve(pending_id, actor, notes), f"Approved {pending_id}", "Approval refused")


@pending.command("reject")
@click.argument("pending_id")
@click.option("--notes", default=None, help="Reason sent to the submitter")
@click.option("--as", "actor_id", required=True, help="Acting administrator id")
@click.pass_context
def pending_reject(ctx: click.Context, pending_id: str, notes: str | None, actor_id: str):
    """Reject PENDING_ID."""
    platform = _platform(ctx)
    actor = _actor(platform, actor_id)
    _outcome(platform.content.reject(pending_id, actor, notes), f"Rejected {pending_id}", "Rejection refused")


# ── Reports ──────────────────────────────────────────────────────────


@main.group()
def reports():
    """Work the report queue."""


@reports.command("list")
@click.option("--target", type=click.Choice(["comment", "user"]), default=None)
@click.pass_context
def reports_list(ctx: click.Context, target: str | None):
    """List open reports."""
    platform = _platform(ctx)
    open_reports = platform.reports.list_pending(target)
    if not open_reports:
        console.print("[green]No open reports.[/]")
        return

    table = Table(title=f"Open reports ({len(open_reports)})")
    table.add_column("ID", style="dim")
    table.add_column("Target")
    table.add_column("Reporter", style="cyan")
    table.add_column("Reason")
    table.add_column("Description")
    for r in open_reports:
        table.add_row(r.id, f"{r.target_kind.value}:{r.target_id}", r.reporter_id, r.reason.label, r.description[:50])
    console.print(table)


@reports.command("resolve")
@click.argument("report_id")
@click.option("--dismiss", is_flag=True, help="Close as dismissed instead of resolved")
@click.option("--notes", default=None)
@click.option("--as", "actor_id", required=True, help="Acting moderator id")
@click.pass_context
def reports_resolve(ctx: click.Context, report_id: str, dismiss: bool, notes: str | None, actor_id: str):
    """Close REPORT_ID."""
    platform = _platform(ctx)
    actor = _actor(platform, actor_id)
    status = "dismissed" if dismiss else "resolved"
    _outcome(platform.reports.resolve(report_id, actor, status, notes), f"Report {report_id} {status}", "Resolve refused")


# ── Notifications ────────────────────────────────────────────────────


@main.command()
@click.option("--as", "actor_id", required=True, help="Whose inbox to show")
@click.option("--unread", is_flag=True, help="Only unread notifications")
@click.option("--limit", type=int, default=20)
@click.option("--mark-read", is_flag=True, help="Mark everything read after listing")
@click.pass_context
def notifications(ctx: click.Context, actor_id: str, unread: bool, limit: int, mark_read: bool):
    """Show a user's inbox, newest first."""
    platform = _platform(ctx)
    actor = _actor(platform, actor_id)
    items = platform.notifications.list(actor.id, unread_only=unread, limit=limit)
    if not items:
        console.print("[dim]Inbox empty.[/]")
        return

    table = Table(title=f"Notifications for {actor.display_name}")
    table.add_column("", width=1)
    table.add_column("When", style="dim")
    table.add_column("Type")
    table.add_column("Title", style="cyan")
    table.add_column("Message")
    for n in items:
        table.add_row("" if n.read else "*", n.created_at[:19], n.type.value, n.title, n.message)
    console.print(table)

    if mark_read:
        count = platform.notifications.mark_all_read(actor.id)
        console.print(f"[green]Marked {count} as read.[/]")


if __name__ == "__main__":
    main()
