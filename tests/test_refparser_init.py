import threading
import types

import pytest

import refparser
from refparser.cache import InstanceCache


class DummyParser:
    def __init__(self, created):
        created.append(self)
        self.closed = False

    def parse(self, input, format=None):
        return [{"input": input, "format": format}]

    def close(self):
        self.closed = True


@pytest.fixture
def defaults(monkeypatch):
    state = types.SimpleNamespace(created=[], register_calls=[])
    monkeypatch.setattr(refparser, "_default_parsers", InstanceCache(lambda: DummyParser(state.created)))
    monkeypatch.setattr(refparser, "_close_callback_registered", False)
    monkeypatch.setattr("atexit.register", state.register_calls.append)
    return state


def test_default_parser_is_lazy_and_reused(defaults):
    assert defaults.created == []

    assert refparser.parse("Doe 2001", format="csl") == [{"input": "Doe 2001", "format": "csl"}]
    assert refparser.get_default_parser() is defaults.created[0]
    assert len(defaults.created) == 1
    assert defaults.register_calls == [refparser.reset_default_parser]


def test_default_parser_per_thread(defaults):
    main = refparser.get_default_parser()
    seen = []

    def worker():
        seen.append(refparser.get_default_parser())
        seen.append(refparser.get_default_parser())

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()

    assert seen[0] is seen[1]
    assert seen[0] is not main
    assert len(defaults.created) == 2


def test_reset_closes_and_forgets_parsers(defaults):
    first = refparser.get_default_parser()

    refparser.reset_default_parser()

    assert first.closed
    assert refparser.get_default_parser() is not first


def test_instance_cache_uses_context_key():
    context = ["a"]
    cache = InstanceCache(object, context=lambda: context[0])

    first = cache.get()
    assert cache.get() is first
    assert cache.peek() is first

    context[0] = "b"
    assert cache.peek() is None
    assert cache.get() is not first
    assert len(cache) == 2

    cache.reset()
    assert len(cache) == 0


class Closable:
    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


def _run_in_thread(func) -> None:
    thread = threading.Thread(target=func)
    thread.start()
    thread.join()


def test_instances_of_finished_threads_are_closed() -> None:
    cache = InstanceCache(Closable)
    seen = []

    _run_in_thread(lambda: seen.append(cache.get()))
    assert len(cache) == 1

    main = cache.get()

    assert seen[0].closed
    assert not main.closed
    assert len(cache) == 1


def test_reused_context_key_gets_fresh_instance() -> None:
    cache = InstanceCache(Closable, context=lambda: "shared-ident")
    seen = []

    _run_in_thread(lambda: seen.append(cache.get()))
    assert cache.peek() is None

    fresh = cache.get()

    assert fresh is not seen[0]
    assert seen[0].closed


def test_prune_drops_dead_threads() -> None:
    cache = InstanceCache(Closable)
    seen = []

    _run_in_thread(lambda: seen.append(cache.get()))

    assert cache.prune() == 1
    assert len(cache) == 0
    assert seen[0].closed
