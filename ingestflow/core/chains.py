"""Per-type rule chains.

Each function here owns the *order* of the rules for one message type and
nothing else.  To add a rule, decide where it goes in the flow and insert
it there.
"""

from __future__ import annotations

from operator import methodcaller

from ingestflow.core.rules import ConditionalRule, DefaultRule, RuleChain
from ingestflow.routing.sinks import BaseSink


def save_to_success(success_sink: BaseSink) -> DefaultRule:
    """The shared terminal rule for types that end in the success sinks."""
    return DefaultRule(success_sink, name="save_to_success")


def member_event_chain(
    success_sink: BaseSink,
    excluded_sink: BaseSink,
    other_excluded_sink: BaseSink | None = None,
) -> RuleChain:
    """Member events: example exclusion, then other exclusion, then success.

    Both exclusion rules write to *excluded_sink* unless a separate
    *other_excluded_sink* is given for the second one.
    """
    return RuleChain(
        [
            ConditionalRule(
                "example_excluded",
                methodcaller("example_should_be_excluded"),
                excluded_sink,
            ),
            ConditionalRule(
                "other_excluded",
                methodcaller("other_should_be_excluded"),
                other_excluded_sink or excluded_sink,
            ),
            save_to_success(success_sink),
        ],
        name="member_event",
    )
