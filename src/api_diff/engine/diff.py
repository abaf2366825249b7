"""Comparison entry points: run every rule over one shared context."""

import concurrent.futures
import logging

from api_diff.errors import MalformedDocumentError, RuleFaultError
from api_diff.parser.base import Document
from api_diff.parser.openapi import parse_document

from .context import DiffContext, build_context
from .events import DiffEvent
from .rules import RULE_IDS, RULES, Rule

logger = logging.getLogger(__name__)


def compare(
    old_doc: Document,
    new_doc: Document,
    rules: list[str] | None = None,
    max_workers: int | None = None,
) -> list[DiffEvent]:
    """Compare two documents and return their findings.

    Findings are ordered by rule (RULES order), then by the order each
    rule visits endpoints and properties. ``rules`` restricts the output
    to the given event ids; ``max_workers`` evaluates rules on a thread pool
    without changing the result.
    """
    for name, doc in (("old", old_doc), ("new", new_doc)):
        if not isinstance(doc, Document):
            raise MalformedDocumentError(
                f"Expected a Document for the {name} input, got {type(doc).__name__}", name
            )

    selected, wanted = _select_rules(rules)
    context = build_context(old_doc, new_doc)

    if max_workers:
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(_run_rule, rule_id, rule, context)
                for rule_id, rule in selected
            ]
            outputs = [f.result() for f in futures]
    else:
        outputs = [_run_rule(rule_id, rule, context) for rule_id, rule in selected]

    results = []
    for events in outputs:
        results.extend(e for e in events if wanted is None or e.rule_id in wanted)
    return results


def compare_texts(old_text: str, new_text: str, **kwargs) -> list[DiffEvent]:
    """Parse two OpenAPI/Swagger documents and compare them."""
    old_doc = parse_document(old_text, source="old")
    new_doc = parse_document(new_text, source="new")
    return compare(old_doc, new_doc, **kwargs)


def _select_rules(rule_ids: list[str] | None) -> tuple[list[tuple[str, Rule]], set[str] | None]:
    """Return the rules to run and the event ids to keep (None keeps all)."""
    if rule_ids is None:
        return list(RULES.items()), None
    wanted = set(rule_ids)
    known = {event_id for ids in RULE_IDS.values() for event_id in ids}
    unknown = sorted(wanted - known)
    if unknown:
        raise ValueError(f"Unknown rule id(s): {', '.join(unknown)}")
    selected = [
        (rule_id, rule) for rule_id, rule in RULES.items()
        if wanted.intersection(RULE_IDS[rule_id])
    ]
    return selected, wanted



def _run_rule(rule_id: str, rule: Rule, context: DiffContext) -> list[DiffEvent]:
    try:
        events = list(rule(context))
    except Exception as e:
        raise RuleFaultError(rule_id, e) from e
    logger.debug("Rule %s produced %d event(s)", rule_id, len(events))
    return events
