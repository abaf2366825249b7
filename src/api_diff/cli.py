"""CLI entry point for api-diff."""

import logging
import sys
from pathlib import Path

import click

from api_diff.engine.diff import compare
from api_diff.engine.events import DiffEvent, Severity
from api_diff.errors import ApiDiffError
from api_diff.loader import DEFAULT_TIMEOUT, load_source
from api_diff.parser.base import Document
from api_diff.parser.openapi import parse_document
from api_diff.report.json_report import render_json
from api_diff.report.markdown import render_markdown
from api_diff.report.text import render_text

EXIT_OK = 0
EXIT_BREAKING = 2
EXIT_ERROR = 64


def exit_code_for(events: list[DiffEvent], fail_on_breaking: bool) -> int:
    if fail_on_breaking and any(e.severity == Severity.BREAKING for e in events):
        return EXIT_BREAKING
    return EXIT_OK


def _load_doc(location: str, timeout: float) -> Document:
    """Read and parse one API description."""
    return parse_document(load_source(location, timeout=timeout), source=location)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def main(verbose: bool):
    """api-diff: detect breaking changes between two OpenAPI documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@main.command("compare")
@click.option("--old", "old_src", required=True, help="The old OpenAPI document (file or URL).")
@click.option("--new", "new_src", required=True, help="The new OpenAPI document (file or URL).")
@click.option("--format", "fmt", default="text", envvar="API_DIFF_FORMAT", show_default=True,
              type=click.Choice(["text", "json", "markdown"]), help="Output format.")
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Also write a Markdown report to this file.")
@click.option("--fail-on-breaking", is_flag=True, help="Exit with code 2 if any breaking change is found.")
@click.option("--timeout", default=DEFAULT_TIMEOUT, envvar="API_DIFF_TIMEOUT", type=float,
              show_default=True, help="Timeout in seconds for URL inputs.")
def compare_cmd(old_src: str, new_src: str, fmt: str, out: Path | None, fail_on_breaking: bool, timeout: float):
    """Compare two OpenAPI documents for breaking changes."""
    try:
        old_doc = _load_doc(old_src, timeout)
        new_doc = _load_doc(new_src, timeout)
        events = compare(old_doc, new_doc)

        if fmt == "json":
            click.echo(render_json(events))
        elif fmt == "markdown":
            click.echo(render_markdown(events), nl=False)
        else:
            click.echo(render_text(events))

        if out is not None:
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(render_markdown(events), encoding="utf-8")
            if fmt != "json":
                click.echo(f"\nReport generated at: {out}")
    except (ApiDiffError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    sys.exit(exit_code_for(events, fail_on_breaking))
