from __future__ import annotations

import pytest

from vigil.core.properties import ChangeDispatcher, PropertyRegistry, ValueStore
from vigil.core.properties.invariants import assert_invariants


def _make_store() -> tuple[ValueStore, ChangeDispatcher, list[tuple[str, object]]]:
    reg = PropertyRegistry()
    reg.register({"type": "switch", "key": "enabled", "name": "Enabled", "category": "General"})
    reg.register(
        {"type": "int_slider", "key": "count", "name": "Count", "category": "General", "default": 5}
    )
    reg.register(
        {
            "type": "text",
            "key": "label",
            "name": "Label",
            "category": "General",
            "default": "hello",
            "trigger_on_init": False,
        }
    )
    reg.register({"type": "button", "key": "go", "name": "Go", "category": "General"})

    dispatcher = ChangeDispatcher()
    calls: list[tuple[str, object]] = []
    for key in ("enabled", "count", "label", "go"):
        dispatcher.subscribe(key, lambda v, key=key: calls.append((key, v)))
    return ValueStore(reg, dispatcher), dispatcher, calls


def test_initialize_merges_loaded_and_defaults_and_notifies():
    store, _, calls = _make_store()
    store.initialize({"count": 9})

    assert store.get("enabled") is False
    assert store.get("count") == 9
    assert store.get("label") == "hello"
    assert store.get("go") is None
    # trigger_on_init=False と button は通知しない。既定値と同じ値でも通知する。
    assert calls == [("enabled", False), ("count", 9)]
    assert store.dirty is False
    assert_invariants(store)


def test_initialize_twice_raises():
    store, _, _ = _make_store()
    store.initialize({})
    with pytest.raises(RuntimeError):
        store.initialize({})


def test_equal_set_is_suppressed():
    store, _, calls = _make_store()
    store.initialize({})
    calls.clear()

    assert store.set_value("count", 7) is True
    assert store.set_value("count", 7) is False

    assert calls == [("count", 7)]
    assert store.dirty is True


def test_set_unknown_key_and_button():
    store, _, _ = _make_store()
    store.initialize({})
    with pytest.raises(KeyError):
        store.set_value("missing", 1)
    with pytest.raises(ValueError):
        store.set_value("go", 1)


def test_reset_to_defaults_notifies_only_changed():
    store, _, calls = _make_store()
    store.initialize({})
    store.set_value("enabled", True)
    store.set_value("label", "changed")
    calls.clear()

    changed = store.reset_to_defaults()

    assert changed == ["enabled", "label"]
    assert calls == [("enabled", False), ("label", "hello")]
    assert store.snapshot() == {"enabled": False, "count": 5, "label": "hello"}
    assert_invariants(store)


def test_failing_listener_does_not_roll_back():
    store, dispatcher, calls = _make_store()
    store.initialize({})

    def boom(_v: object) -> None:
        raise RuntimeError("boom")

    dispatcher.subscribe("count", boom)
    dispatcher.subscribe("count", lambda v: calls.append(("count-late", v)))
    calls.clear()

    assert store.set_value("count", 50) is True
    assert store.get("count") == 50
    assert calls == [("count", 50), ("count-late", 50)]


def test_clear_resets_store():
    store, _, _ = _make_store()
    store.initialize({})
    store.set_value("enabled", True)
    store.clear()

    assert store.snapshot() == {}
    assert store.dirty is False
    assert store.initialized is False
