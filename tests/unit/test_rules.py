"""Tests for rules, RuleChain validation and run_chain early exit."""

from __future__ import annotations

import pytest

from ingestflow.core.chains import member_event_chain
from ingestflow.core.rules import (
    ConditionalRule,
    Decision,
    DefaultRule,
    RuleChain,
    RuleChainError,
    run_chain,
)
from ingestflow.routing.sinks.memory import InMemorySink


class _StubHandler:
    """Answers fixed queries and records every save."""

    def __init__(self, example: bool = False, other: bool = False) -> None:
        self._example = example
        self._other = other
        self.saved_to: list[str] = []

    def example_should_be_excluded(self) -> bool:
        return self._example

    def other_should_be_excluded(self) -> bool:
        return self._other

    def save(self, sink) -> None:
        self.saved_to.append(sink.sink_name)


@pytest.fixture
def sinks() -> dict[str, InMemorySink]:
    return {name: InMemorySink(name) for name in ("rule1", "rule2", "success")}


@pytest.fixture
def chain(sinks) -> RuleChain:
    return member_event_chain(sinks["success"], sinks["rule1"], sinks["rule2"])


class TestRules:
    def test_conditional_rule_diverts_when_predicate_holds(self):
        sink = InMemorySink("x")
        rule = ConditionalRule("r", lambda h: True, sink)
        handler = _StubHandler()
        assert rule.apply(handler) is Decision.DIVERTED
        assert handler.saved_to == ["x"]

    def test_conditional_rule_continues_without_side_effect(self):
        rule = ConditionalRule("r", lambda h: False, InMemorySink("x"))
        handler = _StubHandler()
        assert rule.apply(handler) is Decision.CONTINUE
        assert handler.saved_to == []

    def test_default_rule_always_saves(self):
        rule = DefaultRule(InMemorySink("success"))
        handler = _StubHandler(example=True, other=True)
        assert rule.apply(handler) is Decision.DIVERTED
        assert handler.saved_to == ["success"]


class TestRuleChainValidation:
    def test_empty_chain_rejected(self):
        with pytest.raises(RuleChainError, match="no rules"):
            RuleChain([])

    def test_must_end_with_default(self):
        rule = ConditionalRule("r", lambda h: False, InMemorySink("x"))
        with pytest.raises(RuleChainError, match="must end with a DefaultRule"):
            RuleChain([rule])

    def test_default_only_at_end(self):
        sink = InMemorySink("x")
        with pytest.raises(RuleChainError, match="position 0"):
            RuleChain([DefaultRule(sink, name="a"), DefaultRule(sink, name="b")])

    def test_duplicate_names_rejected(self):
        sink = InMemorySink("x")
        with pytest.raises(RuleChainError, match="duplicate"):
            RuleChain([
                ConditionalRule("same", lambda h: False, sink),
                ConditionalRule("same", lambda h: False, sink),
                DefaultRule(sink),
            ])

    def test_member_event_chain_order(self, chain):
        assert chain.rule_names == ["example_excluded", "other_excluded", "save_to_success"]
        assert len(chain) == 3

    def test_rules_tuple_is_immutable(self, chain):
        assert isinstance(chain.rules, tuple)


class TestRunChain:
    def test_first_rule_wins(self, chain):
        handler = _StubHandler(example=True, other=True)
        rule = run_chain(chain, handler)
        assert rule.name == "example_excluded"
        assert handler.saved_to == ["rule1"]

    def test_second_rule_when_first_does_not_hold(self, chain):
        handler = _StubHandler(example=False, other=True)
        rule = run_chain(chain, handler)
        assert rule.name == "other_excluded"
        assert handler.saved_to == ["rule2"]

    def test_default_when_no_rule_holds(self, chain):
        handler = _StubHandler()
        rule = run_chain(chain, handler)
        assert rule.name == "save_to_success"
        assert handler.saved_to == ["success"]

    @pytest.mark.parametrize("example", [True, False])
    @pytest.mark.parametrize("other", [True, False])
    def test_exactly_one_save(self, chain, example, other):
        handler = _StubHandler(example=example, other=other)
        run_chain(chain, handler)
        assert len(handler.saved_to) == 1

    def test_later_rules_not_evaluated_after_diversion(self, sinks):
        evaluated: list[str] = []

        def _pred(name: str, result: bool):
            def _p(handler) -> bool:
                evaluated.append(name)
                return result
            return _p

        chain = RuleChain([
            ConditionalRule("a", _pred("a", False), sinks["rule1"]),
            ConditionalRule("b", _pred("b", True), sinks["rule2"]),
            ConditionalRule("c", _pred("c", True), sinks["rule2"]),
            DefaultRule(sinks["success"]),
        ])
        run_chain(chain, _StubHandler())
        assert evaluated == ["a", "b"]

    def test_predicate_error_propagates_unchanged(self, sinks):
        boom = LookupError("lookup failed")

        def _raise(handler) -> bool:
            raise boom

        chain = RuleChain([
            ConditionalRule("a", _raise, sinks["rule1"]),
            DefaultRule(sinks["success"]),
        ])
        handler = _StubHandler()
        with pytest.raises(LookupError) as exc_info:
            run_chain(chain, handler)
        assert exc_info.value is boom
        assert handler.saved_to == []

    def test_custom_rule_in_chain(self, sinks):
        """Any object with a name and apply() can precede the default rule."""

        class _DropAll:
            name = "drop_all"

            def __init__(self, sink) -> None:
                self._sink = sink

            def apply(self, handler) -> Decision:
                handler.save(self._sink)
                return Decision.DIVERTED

        custom = _DropAll(sinks["rule2"])
        chain = RuleChain([custom, DefaultRule(sinks["success"])])
        handler = _StubHandler()

        assert run_chain(chain, handler) is custom
        assert handler.saved_to == ["rule2"]
