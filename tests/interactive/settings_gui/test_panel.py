"""settings_gui.panel（表示セクション算出 / ウィジェット結果の反映 / パネル描画）のテスト。"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from vigil import Config
from vigil.interactive.settings_gui.panel import (
    PanelState,
    apply_widget_result,
    render_settings_panel,
    resolve_active_category,
    theme_rgb,
    visible_sections,
)


def _config(tmp_path: Path, calls: list[str] | None = None) -> Config:
    calls = [] if calls is None else calls
    cfg = Config("Panel", path=tmp_path / "panel.toml", open_key="F2")
    cfg.register({"type": "switch", "key": "enabled", "name": "Enabled", "category": "General"})
    cfg.register(
        {"type": "int_slider", "key": "level", "name": "Level", "category": "General", "subcategory": "Tuning"}
    )
    cfg.register(
        {
            "type": "int_slider",
            "key": "hidden_level",
            "name": "Hidden",
            "category": "General",
            "subcategory": "Secret",
        }
    )
    cfg.register({"type": "color", "key": "accent", "name": "Accent", "category": "Look", "default": (255, 51, 102, 204)})
    cfg.register(
        {
            "type": "button",
            "key": "ping",
            "name": "Ping",
            "category": "Look",
            "description": "sends a ping",
            "action": lambda: calls.append("ping"),
        }
    )
    cfg.add_dependency("level", "enabled")
    cfg.hide_property("hidden_level")
    cfg.initialize()
    return cfg


def test_visible_sections_drop_hidden_and_disabled(tmp_path: Path):
    cfg = _config(tmp_path)

    sections = visible_sections(cfg, "General")
    assert [(sub, [d.key for d in rows]) for sub, rows in sections] == [("", ["enabled"])]

    cfg.set("enabled", True)
    sections = visible_sections(cfg, "General")
    assert [(sub, [d.key for d in rows]) for sub, rows in sections] == [
        ("", ["enabled"]),
        ("Tuning", ["level"]),
    ]


def test_resolve_active_category_defaults_to_first(tmp_path: Path):
    cfg = _config(tmp_path)
    state = PanelState()
    assert resolve_active_category(cfg, state) == "General"

    state.active_category = "Look"
    assert resolve_active_category(cfg, state) == "Look"

    state.active_category = "Gone"
    assert resolve_active_category(cfg, state) == "General"


def test_apply_widget_result_sets_value(tmp_path: Path):
    cfg = _config(tmp_path)
    level = cfg.descriptor("level")
    assert level is not None

    assert apply_widget_result(cfg, level, False, 50) is False
    assert cfg.get("level") == 0
    assert apply_widget_result(cfg, level, True, 50) is True
    assert cfg.get("level") == 50
    assert cfg.dirty is True


def test_apply_widget_result_logs_bad_value(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    cfg = _config(tmp_path)
    level = cfg.descriptor("level")
    assert level is not None

    with caplog.at_level(logging.WARNING):
        assert apply_widget_result(cfg, level, True, "not a number") is False
    assert cfg.get("level") == 0
    assert any("level" in r.getMessage() for r in caplog.records)


def test_apply_widget_result_runs_button_action(tmp_path: Path):
    calls: list[str] = []
    cfg = _config(tmp_path, calls)
    ping = cfg.descriptor("ping")
    assert ping is not None

    assert apply_widget_result(cfg, ping, True, None) is True
    assert calls == ["ping"]
    assert cfg.dirty is False


def test_theme_rgb_uses_first_color(tmp_path: Path):
    cfg = _config(tmp_path)
    assert theme_rgb(cfg) == pytest.approx((0.2, 0.4, 0.8))

    plain = Config("Plain", path=tmp_path / "plain.toml")
    plain.register({"type": "switch", "key": "a", "name": "A", "category": "C"})
    plain.initialize()
    assert theme_rgb(plain) is None


def test_render_panel_draws_sidebar_and_visible_rows(tmp_path: Path, fake_imgui):
    cfg = _config(tmp_path)
    state = PanelState()
    fake_imgui.responses["checkbox"] = (True, True)

    changed = render_settings_panel(fake_imgui, cfg, state)

    assert changed is True
    assert cfg.get("enabled") is True
    selectables = [args[0] for name, args in fake_imgui.calls if name == "selectable"]
    assert selectables == ["General##cat_General", "Look##cat_Look"]
    assert "F2 to close   |   Panel Settings" in fake_imgui.texts()
    # level の表示は次のフレームから（このフレームの描画対象は描画前に決まる）。
    assert "-- Tuning --" not in fake_imgui.texts()
    assert fake_imgui.names().count("begin_child") == fake_imgui.names().count("end_child") == 2


def test_render_panel_switches_category_and_shows_description(tmp_path: Path, fake_imgui):
    calls: list[str] = []
    cfg = _config(tmp_path, calls)
    state = PanelState()
    fake_imgui.selected.add("Look##cat_Look")
    fake_imgui.clicked.add("Ping##btn_ping")

    render_settings_panel(fake_imgui, cfg, state)

    assert state.active_category == "Look"
    assert calls == ["ping"]
    assert "  sends a ping" in fake_imgui.texts()


def test_reset_all_button_restores_defaults(tmp_path: Path, fake_imgui):
    cfg = _config(tmp_path)
    cfg.set("enabled", True)
    cfg.set("level", 30)
    fake_imgui.clicked.add("Reset All##global_reset")

    render_settings_panel(fake_imgui, cfg, PanelState())

    assert cfg.get("enabled") is False
    assert cfg.get("level") == 0


def test_inline_action_button(tmp_path: Path, fake_imgui):
    calls: list[str] = []
    cfg = Config("Inline", path=tmp_path / "inline.toml")
    cfg.register(
        {
            "type": "text",
            "key": "url",
            "name": "URL",
            "category": "Net",
            "inline_action": {"name": "Open", "action": lambda: calls.append("open")},
        }
    )
    cfg.initialize()
    fake_imgui.clicked.add("Open##inline_url")

    render_settings_panel(fake_imgui, cfg, PanelState())

    assert calls == ["open"]


def test_render_error_is_shown_inside_panel(tmp_path: Path, fake_imgui, caplog: pytest.LogCaptureFixture):
    cfg = _config(tmp_path)

    def broken_checkbox(label: str, state: bool):
        raise RuntimeError("widget exploded")

    fake_imgui.checkbox = broken_checkbox  # type: ignore[method-assign]

    with caplog.at_level(logging.ERROR):
        render_settings_panel(fake_imgui, cfg, PanelState())

    colored = [args[0] for name, args in fake_imgui.calls if name == "text_colored"]
    assert colored == ["Enabled: widget exploded"]
    assert fake_imgui.names()[-1] == "end_child"


def test_revealed_secrets_belong_to_panel_state(tmp_path: Path, fake_imgui):
    cfg = Config("Secrets", path=tmp_path / "secrets.toml")
    cfg.register({"type": "text", "key": "token", "name": "Token", "category": "Auth", "protected": True})
    cfg.initialize()
    shown = PanelState()
    fake_imgui.clicked.add("Show##btn_token")

    render_settings_panel(fake_imgui, cfg, shown)
    fake_imgui.clicked = set()
    fresh = PanelState()
    render_settings_panel(fake_imgui, cfg, fresh)

    assert shown.revealed_keys == {"token"}
    assert fresh.revealed_keys == set()
