"""Rule chain engine — ordered, early-exit persistence decisions.

A chain is a plain ordered tuple of rules interpreted by ``run_chain()``:

    rule_1 -> rule_2 -> ... -> default

Each conditional rule either diverts the message (saves it to its own sink
and stops the chain) or lets it continue.  The last rule is always a
``DefaultRule``, which saves unconditionally.  The result is that a message
is saved exactly once: to the sink of the first rule whose condition holds,
or to the default sink if none does.

Rules catch nothing.  A failing predicate or save propagates straight out of
``run_chain()`` to the handler's ``process()``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ingestflow.handlers.base import MessageHandler
    from ingestflow.routing.sinks import BaseSink

logger = logging.getLogger(__name__)


class RuleChainError(ValueError):
    """Raised when a chain is not a valid ordered rule sequence."""


class Decision(str, Enum):
    """Outcome of applying one rule."""

    DIVERTED = "diverted"  # Saved here; stop the chain
    CONTINUE = "continue"  # Not for this rule; try the next one


class Rule(Protocol):
    """One decision step of a chain.

    ``ConditionalRule`` and ``DefaultRule`` are the stock rules; any object
    with a ``name`` and an ``apply()`` returning a ``Decision`` may sit
    before the terminal ``DefaultRule``.
    """

    name: str

    def apply(self, handler: MessageHandler) -> Decision:
        ...


class ConditionalRule:
    """Diverts a message to *sink* when *predicate* holds.

    Parameters
    ----------
    name:
        Identifier used in logs and by ``run_chain()``'s return value.
    predicate:
        Decision function over the handler's classification queries.
    sink:
        Where a diverted message is saved.  Bound once, never per message.
    """

    def __init__(
        self,
        name: str,
        predicate: Callable[[MessageHandler], bool],
        sink: BaseSink,
    ) -> None:
        self.name = name
        self._predicate = predicate
        self._sink = sink

    def apply(self, handler: MessageHandler) -> Decision:
        if not self._predicate(handler):
            return Decision.CONTINUE

        handler.save(self._sink)
        return Decision.DIVERTED

    def __repr__(self) -> str:
        return f"ConditionalRule(name={self.name!r}, sink={self._sink.sink_name!r})"


class DefaultRule:
    """Terminal rule: always saves to *sink*."""

    def __init__(self, sink: BaseSink, name: str = "default") -> None:
        self.name = name
        self._sink = sink

    def apply(self, handler: MessageHandler) -> Decision:
        handler.save(self._sink)
        return Decision.DIVERTED

    def __repr__(self) -> str:
        return f"DefaultRule(name={self.name!r}, sink={self._sink.sink_name!r})"


class RuleChain:
    """Immutable, ordered rule sequence for one message type.

    The final rule must be a ``DefaultRule`` and no other rule may be one,
    so every run of the chain ends in exactly one save.
    """

    def __init__(self, rules: Iterable[Rule], name: str = "chain") -> None:
        self._rules: tuple[Rule, ...] = tuple(rules)
        self.name = name
        self._validate()

    def _validate(self) -> None:
        if not self._rules:
            raise RuleChainError(f"Chain {self.name!r} has no rules")
        if not isinstance(self._rules[-1], DefaultRule):
            raise RuleChainError(
                f"Chain {self.name!r} must end with a DefaultRule, "
                f"got {type(self._rules[-1]).__name__}"
            )
        for position, rule in enumerate(self._rules[:-1]):
            if isinstance(rule, DefaultRule):
                raise RuleChainError(
                    f"Chain {self.name!r} has a DefaultRule at position {position}; "
                    "only the last rule may be unconditional"
                )
        names = [rule.name for rule in self._rules]
        if len(set(names)) != len(names):
            raise RuleChainError(f"Chain {self.name!r} has duplicate rule names: {names}")

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def rule_names(self) -> list[str]:
        return [rule.name for rule in self._rules]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleChain(name={self.name!r}, rules={self.rule_names})"


def run_chain(chain: RuleChain, handler: MessageHandler) -> Rule:
    """Apply *chain* to *handler* left to right, stopping at the first diversion.

    Returns the rule that persisted the message.
    """
    for rule in chain:
        if rule.apply(handler) is Decision.DIVERTED:
            logger.debug("Chain %s: rule %s persisted the message", chain.name, rule.name)
            return rule

    # Unreachable for a validated chain: DefaultRule always diverts.
    raise RuleChainError(f"Chain {chain.name!r} finished without persisting")
