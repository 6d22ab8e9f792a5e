from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Protocol

from .algorithms import format_hint
from .cache import BindingCache
from .consts import NO_BINDINGS_MESSAGE
from .types import BindingPair, Command, SchedulerState, ScopeSelector, Scope, as_scope_selector

logger = logging.getLogger(__name__)

class TimerHandle(Protocol):
    @property
    def active(self) -> bool:
        ...

    def cancel(self) -> None:
        """Cancel the call. Safe to call more than once."""

class TimerService(Protocol):
    def now(self) -> float:
        """Current time in seconds."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        ...

class DisplaySink(Protocol):
    rich_text: bool
    percent_directives: bool

    def show(self, text: str) -> None:
        ...

    def clear(self) -> None:
        ...

class SchedulerConfig(Protocol):
    idle_delay: float
    update_interval: float

def default_lookup_doc(command: Command) -> str | None:
    return command.doc

@dataclass
class IdleSession:
    """Mutable state of one idle scheduler."""
    state: SchedulerState = SchedulerState.ACTIVE
    idle_timer: TimerHandle | None = None
    loop_timer: TimerHandle | None = None
    generation: int = 0
    armed: bool = False
    last_input: float = 0.0
    started: bool = False

class IdleScheduler:
    """Show a random key binding hint while the user is idle.

    The scheduler is ACTIVE while the user is working. Once no input has been
    seen for ``config.idle_delay`` seconds it becomes IDLE, shows a hint and
    replaces it every ``config.update_interval`` seconds. The first input
    after that cancels the loop, clears the hint and makes it ACTIVE again.
    """

    def __init__(
        self,
        cache: BindingCache,
        sink: DisplaySink,
        timers: TimerService,
        config: SchedulerConfig,
        *,
        scope: ScopeSelector | None = None,
        rng: random.Random | None = None,
        lookup_doc: Callable[[Command], str | None] = default_lookup_doc,
    ):
        self._cache = cache
        self._sink = sink
        self._timers = timers
        self._config = config
        if scope is None:
            scope = as_scope_selector(getattr(config, "scope", Scope.ALL))
        self._scope = scope
        self._rng = rng or random.Random()
        self._lookup_doc = lookup_doc
        self._session = IdleSession()
        self._lock = threading.RLock()

    @property
    def state(self) -> SchedulerState:
        return self._session.state

    @property
    def scope(self) -> ScopeSelector:
        return self._scope

    @scope.setter
    def scope(self, selector: str | ScopeSelector):
        # the cache notices the new selector at the next lookup
        self._scope = as_scope_selector(selector)

    @property
    def sink(self) -> DisplaySink:
        return self._sink

    @sink.setter
    def sink(self, sink: DisplaySink):
        with self._lock:
            if self._session.state is SchedulerState.IDLE:
                self._safe_clear()
            self._sink = sink

    @property
    def config(self) -> SchedulerConfig:
        return self._config

    @config.setter
    def config(self, config: SchedulerConfig):
        self._config = config

    @property
    def is_running(self) -> bool:
        return self._session.started

    def start(self) -> None:
        """Start watching for inactivity."""
        with self._lock:
            if self._session.started:
                return
            self._session.started = True
            self._session.last_input = self._timers.now()
            self._arm_idle_timer(self._config.idle_delay)

    def stop(self) -> None:
        """Stop everything and go back to the initial state."""
        with self._lock:
            session = self._session
            self._cancel_loop()
            if session.idle_timer is not None:
                session.idle_timer.cancel()
                session.idle_timer = None
            session.armed = False
            session.started = False
            session.state = SchedulerState.ACTIVE
            self._cache.invalidate()
            self._safe_clear()

    def notify_input(self) -> None:
        """Tell the scheduler that the user did something."""
        with self._lock:
            session = self._session
            session.last_input = self._timers.now()
            if not session.armed:
                return
            session.armed = False
            logger.debug("idle -> active")
            session.state = SchedulerState.ACTIVE
            self._cancel_loop()
            # the active scope may change by the next idle period
            self._cache.invalidate()
            self._safe_clear()
            if session.started:
                self._arm_idle_timer(self._config.idle_delay)

    def show_hint(self) -> BindingPair | None:
        """Show one random hint now and return the chosen binding."""
        with self._lock:
            binding_set = self._cache.get(self._scope)
            if not binding_set:
                self._safe_show(NO_BINDINGS_MESSAGE)
                return None
            pair = self._rng.choice(binding_set.pairs)
            message = format_hint(
                pair,
                self._lookup_doc(pair.command),
                rich_text=getattr(self._sink, "rich_text", False),
                escape_percent=getattr(self._sink, "percent_directives", False),
            )
            logger.debug("hint: %s", message.text)
            self._safe_show(message.text)
            return pair

    def _arm_idle_timer(self, delay: float):
        session = self._session
        if session.idle_timer is not None:
            session.idle_timer.cancel()
        session.idle_timer = self._timers.call_later(delay, self._on_idle_timeout)

    def _on_idle_timeout(self):
        with self._lock:
            session = self._session
            session.idle_timer = None
            if not session.started or session.state is SchedulerState.IDLE:
                return
            remaining = self._config.idle_delay - (self._timers.now() - session.last_input)
            if remaining > 0:
                self._arm_idle_timer(remaining)
                return
            logger.debug("active -> idle")
            session.state = SchedulerState.IDLE
            session.armed = True
            self._loop_step()

    def _on_loop_timeout(self, generation: int):
        with self._lock:
            session = self._session
            if generation != session.generation or session.state is not SchedulerState.IDLE:
                return
            session.loop_timer = None
            self._loop_step()

    def _loop_step(self):
        self.show_hint()
        session = self._session
        session.loop_timer = self._timers.call_later(
            self._config.update_interval,
            partial(self._on_loop_timeout, session.generation),
        )

    def _cancel_loop(self):
        session = self._session
        session.generation += 1
        if session.loop_timer is not None:
            session.loop_timer.cancel()
            session.loop_timer = None

    def _safe_show(self, text: str):
        try:
            self._sink.show(text)
        except Exception:
            logger.debug("failed to show hint", exc_info=True)

    def _safe_clear(self):
        try:
            self._sink.clear()
        except Exception:
            logger.debug("failed to clear hint", exc_info=True)
