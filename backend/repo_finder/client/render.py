from datetime import datetime, timezone
from typing import List, Optional

from .state import FinderStore, NotificationKind
from ..schemas import Repository, SearchRecord


def format_number(num: int) -> str:
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1000:
        return f"{num / 1000:.1f}K"
    return str(num)


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_relative(updated_at: str, now: Optional[datetime] = None) -> str:
    updated = _parse_timestamp(updated_at)
    if updated is None:
        return updated_at
    now = now or datetime.now(timezone.utc)
    days = (now - updated).days
    if days <= 0:
        return "Today"
    if days == 1:
        return "1 day ago"
    if days < 30:
        return f"{days} days ago"
    if days < 365:
        return f"{days // 30} months ago"
    return f"{days // 365} years ago"


def format_timestamp(value: datetime) -> str:
    return value.strftime("%b %d, %Y, %I:%M %p")


def render_repository(repo: Repository, now: Optional[datetime] = None) -> List[str]:
    lines = [
        f"  {repo.full_name}  ({repo.owner.login})",
        f"    {repo.description or 'No description available'}",
        f"    * {format_number(repo.stars)}  forks {format_number(repo.forks)}"
        f"  {repo.language or 'Unknown'}  Updated {format_relative(repo.updated_at, now)}",
        f"    {repo.html_url}",
    ]
    return lines


def render_current(record: SearchRecord, now: Optional[datetime] = None) -> List[str]:
    lines = [
        f'Latest Search: "{record.keyword}"',
        f"Found {record.total_count:,} repositories - Searched {format_timestamp(record.created_at)}",
    ]
    if not record.repository_data:
        lines.append("No repositories found for this search.")
        return lines
    for repo in record.repository_data:
        lines.extend(render_repository(repo, now))
    return lines


def render_history(history: List[SearchRecord]) -> List[str]:
    lines = ["Search History"]
    for record in history:
        stored = len(record.repository_data)
        lines.append(
            f'  "{record.keyword}" - {stored} repositories stored - '
            f"Total found: {record.total_count:,} - {format_timestamp(record.created_at)}"
        )
    return lines


def render_dashboard(store: FinderStore, now: Optional[datetime] = None) -> str:
    """Plain-text view of the whole client state."""
    lines: List[str] = []
    notification = store.notification
    if notification:
        marker = "OK" if notification.kind is NotificationKind.SUCCESS else "!!"
        lines.append(f"[{marker}] {notification.message}")
    if store.form_error:
        lines.append(f"[form] {store.form_error}")
    if store.busy:
        lines.append("Searching...")
        return "\n".join(lines)

    stats = store.stats
    lines.append(
        f"Total Searches: {stats.total_searches} | Repositories Found: {stats.total_repositories}"
        f" | Unique Keywords: {stats.unique_keywords}"
    )
    if store.current:
        lines.append("")
        lines.extend(render_current(store.current, now))
    if store.history:
        lines.append("")
        lines.extend(render_history(store.history))
    else:
        lines.append("")
        lines.append("No searches yet")
        lines.append("Start by searching for GitHub repositories. All your searches will be stored and displayed here.")
    return "\n".join(lines)
