"""Plain console report."""

import click

from api_diff.engine.events import DiffEvent, Severity

NO_CHANGES = "No breaking changes detected."

_COLORS = {Severity.BREAKING: "red", Severity.WARNING: "yellow"}


def render_text(events: list[DiffEvent], color: bool = True) -> str:
    """Render findings one per line, with a breaking-change count header."""
    if not events:
        return click.style(NO_CHANGES, fg="green") if color else NO_CHANGES

    lines = []
    breaking = sum(1 for e in events if e.severity == Severity.BREAKING)
    if breaking:
        lines.append(f"Found {breaking} breaking change(s).")
    for event in events:
        fg = _COLORS.get(event.severity)
        lines.append(click.style(event.message, fg=fg) if color and fg else event.message)
    return "\n".join(lines)
