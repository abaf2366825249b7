"""Machine-readable JSON report."""

import json
from importlib.metadata import PackageNotFoundError, version

from api_diff.engine.events import DiffEvent, Severity

TOOL_NAME = "api-diff"


def _tool_version() -> str:
    try:
        return version(TOOL_NAME)
    except PackageNotFoundError:
        return "unknown"


def _finding(event: DiffEvent) -> dict:
    # Absent members are omitted; null type literals inside details are kept.
    data = event.model_dump(mode="json", by_alias=True)
    if data["location"] is not None:
        data["location"] = {k: v for k, v in data["location"].items() if v is not None}
    return {k: v for k, v in data.items() if v is not None}


def build_report(events: list[DiffEvent]) -> dict:
    """Build the report payload: tool, summary counts and findings."""
    counts = {s: sum(1 for e in events if e.severity == s) for s in Severity}
    return {
        "tool": {"name": TOOL_NAME, "version": _tool_version()},
        "summary": {
            "total": len(events),
            "breaking": counts[Severity.BREAKING],
            "warning": counts[Severity.WARNING],
            "info": counts[Severity.INFO],
        },
        "findings": [_finding(e) for e in events],
    }


def render_json(events: list[DiffEvent]) -> str:
    return json.dumps(build_report(events), indent=2, ensure_ascii=False)
