"""Display attributes for rendering tasks."""

from datetime import datetime

PRIORITY_COLORS: dict[str, str] = {
    "high": "red",
    "medium": "yellow",
    "low": "green",
}
DEFAULT_PRIORITY_COLOR = "gray"

PRIORITY_ICONS: dict[str, str] = {
    "high": "alert-circle",
    "medium": "clock",
    "low": "clock",
}

BLOCK_HOURS: dict[str, str] = {
    "morning": "9-11am",
    "afternoon": "2-5pm",
}


def priority_color(priority: str) -> str:
    """Colour name used for the task card border and background."""
    return PRIORITY_COLORS.get(priority, DEFAULT_PRIORITY_COLOR)


def priority_icon(priority: str) -> str | None:
    """Icon name for a priority, None when it has no icon."""
    return PRIORITY_ICONS.get(priority)


def block_icon(admin_block: str) -> str:
    """Icon name of an admin block."""
    return "sun" if admin_block == "morning" else "sunset"


def block_hours(admin_block: str) -> str:
    """Short time range of an admin block.

    Anything that is not the morning block is shown as the afternoon.
    """
    return BLOCK_HOURS["morning"] if admin_block == "morning" else BLOCK_HOURS["afternoon"]


def block_label(admin_block: str) -> str:
    """Long label, e.g. ``Morning (9-11am)``."""
    return f"{admin_block.capitalize()} ({block_hours(admin_block)})"


def format_due_date(due_date: datetime | None) -> str | None:
    """Due date as ``YYYY-MM-DD``, ignoring the time of day."""
    if due_date is None:
        return None
    return due_date.date().isoformat()
