"""Tests for callable exception facts."""

from __future__ import annotations

import logging

import pytest

from proplint.ir.facts import CallableFact, CallableFacts, make_fact, spec_is_non_throwing


@pytest.mark.parametrize("spelling", [
    "noexcept",
    "void (int) noexcept",
    "noexcept(true)",
    "throw()",
    "int () throw ( )",
    "__attribute__((nothrow))",
    "void () const noexcept",
    "int (int) && noexcept(true)",
    "auto (int) noexcept -> int",
])
def test_non_throwing_spellings(spelling):
    assert spec_is_non_throwing(spelling)


@pytest.mark.parametrize("spelling", [
    None,
    "",
    "int (int)",
    "noexcept(false)",
    "void () noexcept( false )",
    "throw(std::bad_alloc)",
    "void (void (*)() noexcept)",
    "void (std::function<void () noexcept>)",
    "auto (int) -> void (*)() noexcept",
])
def test_throwing_spellings(spelling):
    assert not spec_is_non_throwing(spelling)


class TestMakeFact:
    def test_derives_from_spec(self):
        assert make_fact("f", exception_spec="int () noexcept").non_throwing
        assert not make_fact("g", exception_spec="int ()").non_throwing

    def test_explicit_flag_wins(self):
        fact = make_fact("f", non_throwing=False, exception_spec="noexcept")
        assert fact.non_throwing is False

    def test_extern_linkage_never_propagates(self):
        fact = make_fact("c_api", extern_linkage=True)
        assert not fact.non_throwing
        assert not fact.may_propagate


class TestCallableFacts:
    def test_known_throwing(self):
        facts = CallableFacts([make_fact("parse")])
        assert facts.may_propagate("parse")

    def test_known_non_throwing(self):
        facts = CallableFacts([make_fact("safe", non_throwing=True)])
        assert not facts.may_propagate("safe")

    def test_unknown_is_non_throwing(self, caplog):
        facts = CallableFacts()
        with caplog.at_level(logging.DEBUG, logger="proplint.ir.facts"):
            assert not facts.may_propagate("mystery")
        assert "mystery" in caplog.text

    def test_none_callee(self):
        assert not CallableFacts([make_fact("f")]).may_propagate(None)

    def test_later_add_wins(self):
        facts = CallableFacts([make_fact("f")])
        facts.add(CallableFact(name="f", non_throwing=True))
        assert not facts.may_propagate("f")
        assert len(facts) == 1

    def test_contains_and_lookup(self):
        facts = CallableFacts([make_fact("f")])
        assert "f" in facts
        assert "g" not in facts
        assert facts.lookup("f").name == "f"
        assert facts.lookup("g") is None
