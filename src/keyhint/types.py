from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, Union

@dataclass(frozen=True)
class Command:
    """A named command that a key binding can invoke."""
    name: str
    callback: Callable[[], Any] | None = field(default=None, compare=False)
    doc: str | None = field(default=None, compare=False)

    @property
    def is_invocable(self) -> bool:
        return callable(self.callback)

    def __repr__(self) -> str:
        return f"Command({self.name!r})"

@dataclass(frozen=True)
class BindingPair:
    """A key sequence bound to a command."""
    key: str
    command: Command

class Scope(Enum):
    LOCAL = "local"
    ALL = "all"

@dataclass(frozen=True)
class ExplicitMap:
    """Bindings of one specific target (widget, menu, ...) in isolation."""
    target: Any

ScopeSelector = Union[Scope, ExplicitMap]

def as_scope_selector(value: str | ScopeSelector) -> ScopeSelector:
    """Convert a preference string such as "local" into a scope selector."""
    if isinstance(value, (Scope, ExplicitMap)):
        return value
    return Scope(value)

@dataclass(frozen=True)
class BindingSet:
    selector: ScopeSelector
    pairs: tuple[BindingPair, ...] = ()

    def __len__(self) -> int:
        return len(self.pairs)

    def __bool__(self) -> bool:
        return len(self.pairs) > 0

@dataclass(frozen=True)
class HintMessage:
    text: str

class SchedulerState(Enum):
    ACTIVE = "active"
    IDLE = "idle"
