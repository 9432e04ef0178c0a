# どこで: `src/vigil/interactive/settings_gui/__init__.py`。
# 何を: 設定パネル GUI の公開 API を集約する。
# なぜ: 実装を責務ごとに分割しつつ、利用側の import パスを安定させるため。

from __future__ import annotations

from .gui import SettingsGUI
from .panel import PanelState, render_settings_panel
from .widgets import AssetLoader, render_value_widget

__all__ = [
    "AssetLoader",
    "PanelState",
    "SettingsGUI",
    "render_settings_panel",
    "render_value_widget",
]
