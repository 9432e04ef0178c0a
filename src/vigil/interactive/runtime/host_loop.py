# どこで: `src/vigil/interactive/runtime/host_loop.py`。
# 何を: Config の設定パネルを pyglet の app loop で回すランナー（描画/開閉キー/自動保存 tick）を提供する。
# なぜ: ホストアプリ無しでも Config を GUI で編集でき、tick と破棄の順序を 1 箇所で保証するため。

from __future__ import annotations

import logging
from typing import Any

import pyglet

from vigil.api.config import Config
from vigil.core.runtime_config import runtime_config
from vigil.interactive.settings_gui import AssetLoader, SettingsGUI

_logger = logging.getLogger(__name__)


def create_settings_window(
    *,
    width: int,
    height: int,
    caption: str,
    position: tuple[int, int] | None = None,
) -> Any:
    """設定パネル専用の固定サイズ pyglet ウィンドウを生成する。"""

    window = pyglet.window.Window(width=int(width), height=int(height), caption=str(caption), resizable=False)
    if position is not None:
        window.set_location(int(position[0]), int(position[1]))
    return window


def run_settings_window(
    config: Config,
    *,
    assets: AssetLoader | None = None,
    start_open: bool = True,
) -> None:
    """設定パネルのウィンドウを開き、閉じられるまでループを実行する。

    Parameters
    ----------
    config : Config
        編集対象。未初期化ならここで `initialize()` する。
    assets : AssetLoader | None
        image_reference の表示に使う画像ローダー。
    start_open : bool
        True ならパネルを開いた状態で始める。

    Notes
    -----
    終了時は必ず `config.destroy()` を呼ぶ（未保存の変更はここで保存される）。
    """

    cfg = runtime_config()
    if not config.initialized:
        config.initialize()
    if start_open:
        config.open()

    width, height = cfg.settings_gui_window_size
    window = create_settings_window(
        width=width,
        height=height,
        caption=config.title,
        position=cfg.window_pos_settings_gui,
    )
    gui = SettingsGUI(window, config=config, assets=assets)
    config.attach(gui)

    def on_key_press(symbol: int, modifiers: int) -> Any:
        if config.handle_key_press(pyglet.window.key.symbol_string(symbol)):
            _logger.debug("設定パネルを切り替えました: open=%s", config.is_open)
            return pyglet.event.EVENT_HANDLED
        return None

    def request_exit(*_: object) -> None:
        pyglet.app.exit()

    def autosave(_dt: float) -> None:
        config.tick()

    def draw_frame(_dt: float) -> None:
        if window not in pyglet.app.windows:
            return
        window.draw(_dt)

    window.push_handlers(on_key_press=on_key_press, on_close=request_exit)
    window.push_handlers(on_draw=gui.draw_frame)

    pyglet.clock.schedule_interval(autosave, cfg.autosave_interval_sec)
    pyglet.clock.schedule_interval(draw_frame, 1.0 / 60.0)
    try:
        pyglet.app.run(interval=None)
    finally:
        pyglet.clock.unschedule(draw_frame)
        pyglet.clock.unschedule(autosave)
        config.destroy()


__all__ = ["create_settings_window", "run_settings_window"]
