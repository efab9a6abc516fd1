"""Callable exception facts: which functions and constructors may propagate.

Facts are computed by the frontend (declared exception spec, linkage) and
consumed read-only by the classifier. A callable that is not in the table is
unknown, and unknown callables are treated as non-throwing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

log = logging.getLogger(__name__)

# A trailing noexcept / noexcept(true) / throw() / __attribute__((nothrow)),
# either on its own or after the outermost parameter list. A noexcept inside a
# parameter or return type belongs to that type, not to the callable.
_NON_THROWING_RE = re.compile(
    r"""
    (?:^|\))\s*
    (?:(?:const|volatile)\b\s*|&{1,2}\s*)*
    (?:noexcept(?:\s*\(\s*true\s*\))?
      |throw\s*\(\s*\)
      |__attribute__\s*\(\(\s*nothrow\s*\)\))
    \s*$
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class CallableFact:
    name: str
    non_throwing: bool
    extern_linkage: bool = False        # extern "C": never signals propagation
    exception_spec: str | None = None   # spelling it was derived from, if any

    @property
    def may_propagate(self) -> bool:
        return not self.non_throwing and not self.extern_linkage


def spec_is_non_throwing(spelling: str | None) -> bool:
    """Does a declared type / exception-spec spelling say non-throwing?

    >>> spec_is_non_throwing("void (int) noexcept")
    True
    >>> spec_is_non_throwing("noexcept(false)")
    False
    >>> spec_is_non_throwing("void (void (*)() noexcept)")
    False
    """
    if not spelling:
        return False
    return _NON_THROWING_RE.search(_drop_trailing_return(spelling)) is not None


def _drop_trailing_return(spelling: str) -> str:
    """Cut "auto (int) noexcept -> R" back to "auto (int) noexcept"."""
    depth = 0
    for i, ch in enumerate(spelling):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif depth == 0 and spelling.startswith("->", i):
            return spelling[:i].rstrip()
    return spelling


def make_fact(
    name: str,
    *,
    non_throwing: bool | None = None,
    extern_linkage: bool = False,
    exception_spec: str | None = None,
) -> CallableFact:
    """Build a fact, deriving non_throwing from exception_spec when not given."""
    if non_throwing is None:
        non_throwing = spec_is_non_throwing(exception_spec)
    return CallableFact(
        name=name,
        non_throwing=non_throwing,
        extern_linkage=extern_linkage,
        exception_spec=exception_spec,
    )


class CallableFacts:
    """Name-keyed table of CallableFact, safe for concurrent reads once built."""

    def __init__(self, facts: list[CallableFact] | None = None) -> None:
        self._facts: dict[str, CallableFact] = {}
        for fact in facts or []:
            self.add(fact)

    def add(self, fact: CallableFact) -> None:
        """Add a fact (later add wins on conflict)."""
        self._facts[fact.name] = fact

    def lookup(self, name: str | None) -> CallableFact | None:
        if name is None:
            return None
        return self._facts.get(name)

    def may_propagate(self, name: str | None) -> bool:
        """True iff the callable is known, not non-throwing and not extern linkage."""
        fact = self.lookup(name)
        if fact is None:
            log.debug("No exception fact for callee %r; treating as non-throwing", name)
            return False
        return fact.may_propagate

    def __contains__(self, name: object) -> bool:
        return name in self._facts

    def __len__(self) -> int:
        return len(self._facts)
