# どこで: `src/vigil/interactive/settings_gui/gui.py`。
# 何を: Config を pyimgui で編集するための GUI（初期化/1フレーム描画/破棄）を提供する。
# なぜ: 依存の重いライフサイクル管理を 1 箇所に閉じ込め、他モジュールを純粋に保つため。

from __future__ import annotations

import logging
import time
from typing import Any

from vigil.api.config import Config

from .panel import PanelState, render_settings_panel, theme_rgb
from .widgets import AssetLoader

_logger = logging.getLogger(__name__)

# テーマ色で塗るスタイル項目と、その明度倍率。
_THEMED_STYLE_COLORS: tuple[tuple[str, float], ...] = (
    ("COLOR_TITLE_BACKGROUND", 0.55),
    ("COLOR_TITLE_BACKGROUND_ACTIVE", 0.75),
    ("COLOR_HEADER", 0.6),
    ("COLOR_HEADER_HOVERED", 0.85),
)


class SettingsGUI:
    """pyimgui で Config を編集する GUI。

    `draw_frame()` を呼ぶことで 1 フレーム分の UI を描画する。
    パネルが閉じている間は開閉キーの案内だけを描く。
    """

    def __init__(
        self,
        gui_window: Any,
        *,
        config: Config,
        assets: AssetLoader | None = None,
    ) -> None:
        import imgui  # type: ignore[import-untyped]

        try:
            from imgui.integrations import (
                pyglet as imgui_pyglet,  # type: ignore[import-untyped]
            )
        except Exception as exc:
            raise RuntimeError(f"imgui.integrations.pyglet を import できない: {exc}")

        self._window = gui_window
        self._config = config
        self._assets = assets
        self._state = PanelState()

        # 自前コンテキストを作って切り替えながら使う。
        self._imgui = imgui
        self._context = imgui.create_context()
        imgui.style_colors_dark()
        imgui.set_current_context(self._context)

        self._renderer = imgui_pyglet.create_renderer(gui_window)

        self._prev_time = time.monotonic()
        self._closed = False

    @property
    def state(self) -> PanelState:
        return self._state

    def _push_theme(self) -> int:
        """先頭の color property でタイトル/ヘッダを着色し、push した数を返す。"""

        rgb = theme_rgb(self._config)
        if rgb is None:
            return 0
        imgui = self._imgui
        r, g, b = rgb
        pushed = 0
        for name, scale in _THEMED_STYLE_COLORS:
            idx = getattr(imgui, name, None)
            if idx is None:
                continue
            imgui.push_style_color(idx, r * scale, g * scale, b * scale, 1.0)
            pushed += 1
        return pushed

    def draw_frame(self) -> bool:
        """1 フレーム分の GUI を描画し、値が変わったら True を返す。

        `flip()` は呼ばない。呼び出し側が `window.flip()` を担当する。
        """

        if self._closed:
            return False

        now = time.monotonic()
        dt = now - self._prev_time
        self._prev_time = now

        imgui = self._imgui
        imgui.set_current_context(self._context)

        io = imgui.get_io()
        io.delta_time = max(dt, 1e-4)
        io.display_size = (float(self._window.width), float(self._window.height))
        imgui.new_frame()

        pushed = self._push_theme()
        changed = False
        try:
            imgui.set_next_window_position(0, 0)
            imgui.set_next_window_size(self._window.width, self._window.height)
            imgui.begin(
                self._config.title,
                flags=imgui.WINDOW_NO_RESIZE | imgui.WINDOW_NO_COLLAPSE | imgui.WINDOW_NO_MOVE,
            )
            try:
                if self._config.is_open:
                    changed = render_settings_panel(
                        imgui, self._config, self._state, assets=self._assets
                    )
                else:
                    imgui.text_disabled(f"{self._config.open_key} to open settings")
            finally:
                imgui.end()
        finally:
            if pushed:
                imgui.pop_style_color(pushed)

        imgui.render()

        import pyglet

        pyglet.gl.glClearColor(0.12, 0.12, 0.12, 1.0)
        self._window.clear()
        self._renderer.render(imgui.get_draw_data())
        return changed

    def close(self) -> None:
        """GUI を終了し、コンテキストとウィンドウを破棄する。二重 close は無視する。"""

        if self._closed:
            return
        self._closed = True

        shutdown = getattr(self._renderer, "shutdown", None)
        if callable(shutdown):
            shutdown()
        self._imgui.destroy_context(self._context)
        self._window.close()
        _logger.debug("設定 GUI を閉じました: module=%s", self._config.module_name)


__all__ = ["SettingsGUI"]
