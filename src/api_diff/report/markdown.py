"""Markdown report, suitable for pull request comments."""

from api_diff.engine.events import DiffEvent, Severity

TITLE = "# API Breaking Change Report"


def render_markdown(events: list[DiffEvent]) -> str:
    lines = [TITLE, ""]
    if not events:
        lines.append("✅ No breaking changes detected.")
    for event in events:
        if event.severity == Severity.BREAKING:
            lines.append(f"- 🛑 **BREAKING**: {event.message.replace('BREAKING: ', '')}")
        elif event.severity == Severity.WARNING:
            lines.append(f"- ⚠️ **WARNING**: {event.message.replace('WARNING: ', '')}")
        else:
            lines.append(f"- ℹ️ **INFO**: {event.message}")
    return "\n".join(lines) + "\n"
