from __future__ import annotations

import random
from dataclasses import dataclass

import pytest

from keyhint import BindingCache, IdleScheduler, ReportBindingSource, SchedulerState, Scope
from keyhint.algorithms import format_binding_report
from keyhint.consts import GLOBAL_BINDINGS_LABEL, NO_BINDINGS_MESSAGE
from keyhint._injection_mock import ManualTimerService, RecordingSink, StaticReportSupplier
from keyhint.types import BindingPair

@dataclass
class Config:
    idle_delay: float = 5.0
    update_interval: float = 2.0
    scope: str = "all"

def _supplier(registry) -> StaticReportSupplier:
    local = [BindingPair("C-c C-c", registry.resolve("compile-buffer"))]
    global_ = [
        BindingPair("C-n", registry.resolve("next-line")),
        BindingPair("M-x", registry.resolve("execute-extended-command")),
    ]
    return StaticReportSupplier(
        local_report=format_binding_report([("Major Mode Bindings:", local)]),
        all_report=format_binding_report(
            [("Major Mode Bindings:", local), (GLOBAL_BINDINGS_LABEL, global_)]
        ),
    )

def _make(registry, supplier=None, sink=None, config=None, timers=None):
    supplier = supplier or _supplier(registry)
    sink = sink or RecordingSink()
    timers = timers or ManualTimerService()
    scheduler = IdleScheduler(
        BindingCache(ReportBindingSource(supplier, registry.resolve)),
        sink,
        timers,
        config or Config(),
        rng=random.Random(0),
    )
    return scheduler, sink, timers

def test_idle_loop_counts(registry):
    scheduler, sink, timers = _make(registry)
    scheduler.start()
    timers.advance(4)
    assert scheduler.state is SchedulerState.ACTIVE
    assert sink.shown == []
    timers.advance(1)
    assert scheduler.state is SchedulerState.IDLE
    assert len(sink.shown) == 1
    timers.advance(6)
    assert len(sink.shown) == 4
    assert sink.clear_count == 0

def test_input_returns_to_active_once(registry):
    scheduler, sink, timers = _make(registry)
    scheduler.start()
    timers.advance(5)
    assert scheduler.state is SchedulerState.IDLE
    scheduler.notify_input()
    assert scheduler.state is SchedulerState.ACTIVE
    assert sink.clear_count == 1
    scheduler.notify_input()
    scheduler.notify_input()
    assert sink.clear_count == 1

    # no tick until a full idle period has passed again
    timers.advance(4)
    assert len(sink.shown) == 1
    timers.advance(1)
    assert len(sink.shown) == 2
    assert scheduler.state is SchedulerState.IDLE

def test_input_while_active_postpones_idle(registry):
    scheduler, sink, timers = _make(registry)
    scheduler.start()
    timers.advance(3)
    scheduler.notify_input()
    timers.advance(3)
    assert scheduler.state is SchedulerState.ACTIVE
    assert sink.clear_count == 0
    timers.advance(2)
    assert scheduler.state is SchedulerState.IDLE
    assert len(sink.shown) == 1

def test_hints_are_formatted_bindings(registry):
    scheduler, sink, timers = _make(registry)
    scheduler.start()
    timers.advance(5 + 2 * 20)
    assert set(sink.shown) == {
        "Press C-c C-c to compile the current buffer.",
        "Press C-n to move cursor vertically down one line.",
        "Press M-x to read a command name, then call it.",
    }

def test_local_scope(registry):
    scheduler, sink, timers = _make(registry, config=Config(scope="local"))
    assert scheduler.scope is Scope.LOCAL
    scheduler.start()
    timers.advance(5 + 2 * 5)
    assert set(sink.shown) == {"Press C-c C-c to compile the current buffer."}

def test_no_bindings_message(registry):
    supplier = StaticReportSupplier()
    scheduler, sink, timers = _make(registry, supplier=supplier)
    scheduler.start()
    timers.advance(9)
    assert sink.shown == [NO_BINDINGS_MESSAGE] * 3
    assert scheduler.state is SchedulerState.IDLE

def test_cache_is_refreshed_after_input(registry):
    supplier = _supplier(registry)
    scheduler, sink, timers = _make(registry, supplier=supplier)
    scheduler.start()
    timers.advance(11)
    assert supplier.calls == 1
    scheduler.notify_input()
    timers.advance(5)
    assert supplier.calls == 2

def test_scope_change_applies_at_next_lookup(registry):
    supplier = _supplier(registry)
    scheduler, sink, timers = _make(registry, supplier=supplier)
    scheduler.start()
    timers.advance(5)
    scheduler.scope = "local"
    shown = len(sink.shown)
    timers.advance(2 * 5)
    assert set(sink.shown[shown:]) == {"Press C-c C-c to compile the current buffer."}
    assert supplier.calls == 2

def test_config_change_applies_to_next_schedule(registry):
    config = Config()
    scheduler, sink, timers = _make(registry, config=config)
    scheduler.start()
    timers.advance(5)
    config.update_interval = 10
    timers.advance(2)  # already scheduled tick
    assert len(sink.shown) == 2
    timers.advance(9)
    assert len(sink.shown) == 2
    timers.advance(1)
    assert len(sink.shown) == 3

def test_stop_cancels_everything(registry):
    scheduler, sink, timers = _make(registry)
    scheduler.start()
    timers.advance(5)
    scheduler.stop()
    assert scheduler.state is SchedulerState.ACTIVE
    assert not scheduler.is_running
    assert sink.clear_count == 1
    assert timers.pending() == 0
    timers.advance(100)
    assert len(sink.shown) == 1

    # idempotent
    scheduler.stop()
    assert timers.pending() == 0

def test_restart_after_stop(registry):
    scheduler, sink, timers = _make(registry)
    scheduler.start()
    scheduler.stop()
    scheduler.start()
    scheduler.start()
    timers.advance(5)
    assert len(sink.shown) == 1

def test_sink_errors_do_not_stop_the_loop(registry):
    class BrokenSink(RecordingSink):
        def show(self, text):
            super().show(text)
            raise RuntimeError("wrapped C/C++ object has been deleted")

        def clear(self):
            super().clear()
            raise RuntimeError("wrapped C/C++ object has been deleted")

    scheduler, sink, timers = _make(registry, sink=BrokenSink())
    scheduler.start()
    timers.advance(9)
    assert len(sink.shown) == 3
    scheduler.notify_input()
    assert scheduler.state is SchedulerState.ACTIVE
    assert sink.clear_count == 1

def test_stale_tick_is_ignored(registry):
    class UncancellableTimers(ManualTimerService):
        def call_later(self, delay, callback):
            handle = super().call_later(delay, callback)
            handle.cancel = lambda: None  # the tick was already on its way
            return handle

    scheduler, sink, timers = _make(registry, timers=UncancellableTimers())
    scheduler.start()
    timers.advance(5)
    scheduler.notify_input()
    timers.advance(2)
    assert len(sink.shown) == 1
    assert scheduler.state is SchedulerState.ACTIVE

@pytest.mark.parametrize(
    "rich_text, expected",
    [
        (False, "Press C-n to move cursor vertically down one line."),
        (True, "Press <b>C-n</b> to move cursor vertically down one line."),
    ],
)
def test_sink_capabilities(registry, rich_text, expected):
    scheduler, sink, timers = _make(registry, sink=RecordingSink(rich_text=rich_text))
    pair = None
    while pair is None or pair.key != "C-n":
        pair = scheduler.show_hint()
    assert sink.shown[-1] == expected

def test_percent_directives(registry):
    registry.register("percent", lambda: None, "Show 100% of it.")
    supplier = StaticReportSupplier(
        all_report=format_binding_report(
            [("", [BindingPair("C-%", registry.resolve("percent"))])]
        ),
    )
    sink = RecordingSink(percent_directives=True)
    scheduler, sink, timers = _make(registry, supplier=supplier, sink=sink)
    scheduler.show_hint()
    assert sink.shown == ["Press C-%% to show 100%% of it."]

def test_schedulers_are_independent(registry):
    first, sink1, timers = _make(registry)
    second, sink2, _ = _make(registry, timers=timers)
    first.start()
    second.start()
    timers.advance(5)
    first.notify_input()
    assert first.state is SchedulerState.ACTIVE
    assert second.state is SchedulerState.IDLE
    assert sink1.clear_count == 1
    assert sink2.clear_count == 0
