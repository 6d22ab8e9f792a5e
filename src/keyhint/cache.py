from __future__ import annotations

import logging
from typing import Any, Iterable, Protocol

from .algorithms import extract_bindings, unique_pairs
from .algorithms.extract import Resolver
from .types import BindingPair, BindingSet, ExplicitMap, Scope, ScopeSelector

logger = logging.getLogger(__name__)

class BindingSource(Protocol):
    """Anything that can list the bindings of a scope."""

    def bindings(self, selector: ScopeSelector) -> Iterable[BindingPair]:
        ...

class ReportSupplier(Protocol):
    """Host facility that describes the active bindings as a binding report."""

    def active_bindings_report(self, local_only: bool) -> str:
        ...

    def map_bindings_report(self, target: Any) -> str:
        ...

class ReportBindingSource:
    """Binding source that parses the binding reports of a host.

    Use this when the host has no structured way to list its bindings.
    """

    def __init__(self, supplier: ReportSupplier, resolve: Resolver):
        self._supplier = supplier
        self._resolve = resolve

    def bindings(self, selector: ScopeSelector) -> list[BindingPair]:
        if isinstance(selector, ExplicitMap):
            report = self._supplier.map_bindings_report(selector.target)
            return extract_bindings(report, True, self._resolve)
        local_only = selector is Scope.LOCAL
        report = self._supplier.active_bindings_report(local_only)
        return extract_bindings(report, local_only, self._resolve)

class BindingCache:
    """Memoize the bindings of the last requested scope."""

    def __init__(self, source: BindingSource):
        self._source = source
        self._current: BindingSet | None = None

    @property
    def source(self) -> BindingSource:
        return self._source

    @source.setter
    def source(self, source: BindingSource):
        self._source = source
        self.invalidate()

    def get(self, selector: ScopeSelector) -> BindingSet:
        """Return the bindings of the scope, computing them if needed."""
        if self._current is not None and self._current.selector == selector:
            return self._current
        pairs = unique_pairs(self._source.bindings(selector))
        self._current = BindingSet(selector, tuple(pairs))
        logger.debug("cached %d bindings for %r", len(pairs), selector)
        return self._current

    def invalidate(self) -> None:
        self._current = None

    def is_valid(self) -> bool:
        return self._current is not None
