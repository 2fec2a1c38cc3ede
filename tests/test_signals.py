from __future__ import annotations

import signal
import threading
from concurrent import futures

import pytest

from conductor.errors import LifecycleError
from conductor.signals import ShutdownAggregator, os_signal_source


def test_first_source_releases_wait() -> None:
    aggregator = ShutdownAggregator()
    first, second = threading.Event(), threading.Event()
    aggregator.add(first, name="first")
    aggregator.add(second, name="second")
    aggregator.watch()

    assert aggregator.wait(0.05) is False
    second.set()

    assert aggregator.wait(2.0) is True
    assert aggregator.fired_by == "second"


def test_latch_is_set_once() -> None:
    aggregator = ShutdownAggregator()
    sources = [threading.Event() for _ in range(3)]
    for idx, source in enumerate(sources):
        aggregator.add(source, name=f"src-{idx}")
    aggregator.watch()

    sources[1].set()
    assert aggregator.wait(2.0)
    for source in sources:
        source.set()

    assert aggregator.trigger("shutdown") is False
    assert aggregator.fired_by == "src-1"


def test_trigger_without_sources() -> None:
    aggregator = ShutdownAggregator()
    aggregator.watch()

    assert aggregator.fired is False
    assert aggregator.trigger("shutdown") is True
    assert aggregator.wait(0) is True
    assert aggregator.fired_by == "shutdown"


def test_future_and_callable_sources() -> None:
    aggregator = ShutdownAggregator()
    future: futures.Future = futures.Future()
    gate = threading.Event()
    aggregator.add(future, name="future")
    aggregator.add(lambda: gate.wait(), name="callable")
    aggregator.watch()

    future.set_exception(RuntimeError("boom"))

    assert aggregator.wait(2.0)
    assert aggregator.fired_by == "future"
    gate.set()


def test_sources_must_be_added_before_watch() -> None:
    aggregator = ShutdownAggregator()
    aggregator.watch()

    with pytest.raises(LifecycleError):
        aggregator.add(threading.Event())


def test_unsupported_source_rejected() -> None:
    aggregator = ShutdownAggregator()

    with pytest.raises(TypeError):
        aggregator.add(42)  # type: ignore[arg-type]
    assert aggregator.source_count == 0


@pytest.mark.skipif(not hasattr(signal, "SIGUSR1"), reason="SIGUSR1 unavailable")
def test_os_signal_source_sets_event() -> None:
    previous = signal.getsignal(signal.SIGUSR1)
    try:
        event = os_signal_source("SIGUSR1")
        assert event.is_set() is False
        signal.raise_signal(signal.SIGUSR1)
        assert event.wait(2.0) is True
    finally:
        signal.signal(signal.SIGUSR1, previous)


@pytest.mark.skipif(not hasattr(signal, "SIGUSR2"), reason="SIGUSR2 unavailable")
def test_os_signal_source_restores_previous_handler() -> None:
    seen: list[int] = []

    def _previous(signum, _frame) -> None:
        seen.append(signum)

    original = signal.signal(signal.SIGUSR2, _previous)
    try:
        source = os_signal_source(signal.SIGUSR2)
        assert source.signums == [signal.SIGUSR2]
        assert signal.getsignal(signal.SIGUSR2) is not _previous

        source.restore()

        assert signal.getsignal(signal.SIGUSR2) is _previous
        signal.raise_signal(signal.SIGUSR2)
        assert seen == [signal.SIGUSR2]
        assert source.is_set() is False
    finally:
        signal.signal(signal.SIGUSR2, original)


def test_signal_source_is_watchable() -> None:
    previous = signal.getsignal(signal.SIGINT)
    source = os_signal_source("SIGINT")
    try:
        aggregator = ShutdownAggregator()
        aggregator.add(source, name="os-signal")
        aggregator.watch()
        assert aggregator.wait(0.05) is False
    finally:
        source.restore()
    assert signal.getsignal(signal.SIGINT) is previous
