"""Teach key bindings of a Qt application while the user is idle."""

from .types import (
    BindingPair,
    BindingSet,
    Command,
    ExplicitMap,
    HintMessage,
    SchedulerState,
    Scope,
)
from .cache import BindingCache, ReportBindingSource
from .commands import CommandRegistry
from .scheduler import IdleScheduler

__version__ = "0.1.0"

__all__ = [
    "BindingPair",
    "BindingSet",
    "Command",
    "ExplicitMap",
    "HintMessage",
    "SchedulerState",
    "Scope",
    "BindingCache",
    "ReportBindingSource",
    "CommandRegistry",
    "IdleScheduler",
]
