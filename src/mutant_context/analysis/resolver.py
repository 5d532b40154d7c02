"""Map call sites onto known method declarations."""

from __future__ import annotations

import logging
from collections import defaultdict
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Protocol, Sequence, Tuple

from mutant_context.analysis.model import MethodNotFoundError, MethodRecord

LOGGER = logging.getLogger(__name__)


class MethodResolver(Protocol):
    """Anything that can turn a call's name and argument hints into a known method."""

    def resolve(self, name: str, argument_types: Sequence[str]) -> Optional[MethodRecord]:
        ...


class MethodIndex:
    """
    Read-only index over a method universe.

    Records are kept in insertion order under their plain method name and, separately, under
    their fully-qualified name. The index never changes after construction.
    """

    def __init__(self, methods: Iterable[MethodRecord]) -> None:
        by_name: dict[str, list[MethodRecord]] = defaultdict(list)
        by_qualified_name: dict[str, list[MethodRecord]] = defaultdict(list)
        ordered: list[MethodRecord] = []

        for method in methods:
            ordered.append(method)
            by_name[method.method_name].append(method)
            by_qualified_name[method.fully_qualified_name].append(method)

        self._methods: Tuple[MethodRecord, ...] = tuple(ordered)
        self._by_name: Mapping[str, Tuple[MethodRecord, ...]] = MappingProxyType(
            {name: tuple(records) for name, records in by_name.items()}
        )
        self._by_qualified_name: Mapping[str, Tuple[MethodRecord, ...]] = MappingProxyType(
            {name: tuple(records) for name, records in by_qualified_name.items()}
        )

    def __len__(self) -> int:
        return len(self._methods)

    def candidates(self, name: str) -> Tuple[MethodRecord, ...]:
        return self._by_name.get(name, ())

    def qualified(self, fully_qualified_name: str) -> Tuple[MethodRecord, ...]:
        return self._by_qualified_name.get(fully_qualified_name, ())

    def lookup(self, fully_qualified_name: str, signature: str | None = None) -> MethodRecord:
        """
        Return the method declared as ``fully_qualified_name``.

        Overloads share a qualified name; pass ``signature`` to pick one, otherwise the first
        declaration wins. Raises :class:`MethodNotFoundError` when nothing matches.
        """

        matches = self.qualified(fully_qualified_name)
        if signature is not None:
            matches = tuple(method for method in matches if method.signature == signature)
        if not matches:
            detail = f" with signature {signature!r}" if signature else ""
            raise MethodNotFoundError(f"Target method not found: {fully_qualified_name}{detail}")
        if len(matches) > 1:
            LOGGER.debug("%d overloads of %s; using %s", len(matches), fully_qualified_name, matches[0])
        return matches[0]


class SimpleMethodResolver:
    """
    Heuristic resolver backed by a :class:`MethodIndex`.

    A unique name wins outright. Overloaded names are narrowed by argument count when hints are
    available; remaining ties go to the first declaration in index order. The answer is the
    most likely target, not a verified one.
    """

    def __init__(self, index: MethodIndex) -> None:
        self.index = index

    def resolve(self, name: str, argument_types: Sequence[str]) -> Optional[MethodRecord]:
        candidates = self.index.candidates(name)
        if not candidates:
            return None
        if len(candidates) == 1:
            return candidates[0]

        if argument_types:
            arity = len(argument_types)
            survivors = [method for method in candidates if method.arity == arity]
            if survivors:
                if len(survivors) > 1:
                    LOGGER.debug("Ambiguous call %s/%d: %d candidates, picked %s", name, arity, len(survivors), survivors[0])
                return survivors[0]

        LOGGER.debug("No arity match for %s%s; falling back to %s", name, tuple(argument_types), candidates[0])
        return candidates[0]


__all__ = ["MethodIndex", "MethodResolver", "SimpleMethodResolver"]
