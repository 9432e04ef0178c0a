"""SettingsGUI のライフサイクルを偽 imgui / 偽 pyglet でテストする。"""

from __future__ import annotations

import sys
import types
from pathlib import Path

import pytest

from vigil import Config
from vigil.interactive.settings_gui.gui import SettingsGUI


class DummyRenderer:
    def __init__(self, window: object) -> None:
        self.window = window
        self.rendered: list[object] = []
        self.shutdown_calls = 0

    def render(self, draw_data: object) -> None:
        self.rendered.append(draw_data)

    def shutdown(self) -> None:
        self.shutdown_calls += 1


class DummyWindow:
    width = 560
    height = 460

    def __init__(self) -> None:
        self.cleared = 0
        self.closed = 0

    def clear(self) -> None:
        self.cleared += 1

    def close(self) -> None:
        self.closed += 1


@pytest.fixture
def gui_backend(fake_imgui, monkeypatch: pytest.MonkeyPatch):
    integrations = types.ModuleType("imgui.integrations")
    imgui_pyglet = types.ModuleType("imgui.integrations.pyglet")
    imgui_pyglet.create_renderer = DummyRenderer  # type: ignore[attr-defined]
    integrations.pyglet = imgui_pyglet  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "imgui.integrations", integrations)
    monkeypatch.setitem(sys.modules, "imgui.integrations.pyglet", imgui_pyglet)

    pyglet = types.ModuleType("pyglet")
    pyglet.gl = types.SimpleNamespace(glClearColor=lambda *rgba: None)  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "pyglet", pyglet)
    return fake_imgui


def _config(tmp_path: Path) -> Config:
    cfg = Config("Gui", path=tmp_path / "gui.toml", open_key="F3")
    cfg.register({"type": "switch", "key": "enabled", "name": "Enabled", "category": "General"})
    cfg.register({"type": "color", "key": "accent", "name": "Accent", "category": "General"})
    cfg.initialize()
    return cfg


def test_closed_panel_draws_only_hint(tmp_path: Path, gui_backend):
    cfg = _config(tmp_path)
    window = DummyWindow()
    gui = SettingsGUI(window, config=cfg)

    assert gui.draw_frame() is False

    assert "F3 to open settings" in gui_backend.texts()
    assert "selectable" not in gui_backend.names()
    assert window.cleared == 1
    assert gui_backend.io.display_size == (560.0, 460.0)
    assert gui_backend.io.delta_time > 0.0


def test_open_panel_applies_changes_and_tints_theme(tmp_path: Path, gui_backend):
    cfg = _config(tmp_path)
    cfg.open()
    gui = SettingsGUI(DummyWindow(), config=cfg)
    gui_backend.responses["checkbox"] = (True, True)

    assert gui.draw_frame() is True

    assert cfg.get("enabled") is True
    pushes = [args for name, args in gui_backend.calls if name == "push_style_color"]
    assert len(pushes) == 4
    assert ("pop_style_color", (4,)) in gui_backend.calls
    assert gui.state.active_category == "General"


def test_close_is_idempotent_and_stops_drawing(tmp_path: Path, gui_backend):
    cfg = _config(tmp_path)
    window = DummyWindow()
    gui = SettingsGUI(window, config=cfg)
    cfg.attach(gui)

    cfg.destroy()
    gui.close()

    assert window.closed == 1
    assert gui_backend.names().count("destroy_context") == 1
    assert gui.draw_frame() is False
