"""settings_gui テスト用の偽 `imgui` モジュール（描画呼び出しを記録するだけ）。"""

from __future__ import annotations

import sys
import types
from typing import Any

import pytest


class FakeImgui(types.ModuleType):
    """pyimgui の関数を最小限だけ真似る。

    `responses[name]` に値を入れると、その関数の戻り値を差し替える。
    `clicked` に入れたラベルの button だけが True を返す。
    """

    COLOR_EDIT_UINT8 = 1
    COLOR_EDIT_DISPLAY_RGB = 2
    COLOR_EDIT_INPUT_RGB = 4
    COLOR_TITLE_BACKGROUND = 10
    COLOR_TITLE_BACKGROUND_ACTIVE = 11
    COLOR_HEADER = 12
    COLOR_HEADER_HOVERED = 13
    WINDOW_NO_RESIZE = 1
    WINDOW_NO_COLLAPSE = 2
    WINDOW_NO_MOVE = 4

    def __init__(self) -> None:
        super().__init__("imgui")
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.responses: dict[str, Any] = {}
        self.clicked: set[str] = set()
        self.selected: set[str] = set()
        self.io = types.SimpleNamespace(delta_time=0.0, display_size=(0.0, 0.0), display_fb_scale=(1.0, 1.0))

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def texts(self) -> list[str]:
        return [str(args[0]) for name, args in self.calls if name in ("text", "text_disabled")]

    # --- コンテキスト / フレーム ---
    def create_context(self) -> object:
        self._record("create_context")
        return "ctx"

    def set_current_context(self, ctx: object) -> None:
        self._record("set_current_context", ctx)

    def destroy_context(self, ctx: object) -> None:
        self._record("destroy_context", ctx)

    def style_colors_dark(self) -> None:
        self._record("style_colors_dark")

    def get_io(self) -> types.SimpleNamespace:
        return self.io

    def new_frame(self) -> None:
        self._record("new_frame")

    def render(self) -> None:
        self._record("render")

    def get_draw_data(self) -> str:
        return "draw-data"

    def set_next_window_position(self, x: float, y: float) -> None:
        self._record("set_next_window_position", x, y)

    def set_next_window_size(self, w: float, h: float) -> None:
        self._record("set_next_window_size", w, h)

    def begin(self, title: str, **kwargs: Any) -> None:
        self._record("begin", title)

    def end(self) -> None:
        self._record("end")

    def push_style_color(self, idx: int, r: float, g: float, b: float, a: float) -> None:
        self._record("push_style_color", idx, r, g, b, a)

    def pop_style_color(self, count: int = 1) -> None:
        self._record("pop_style_color", count)

    # --- レイアウト ---
    def same_line(self, *args: Any) -> None:
        self._record("same_line", *args)

    def separator(self) -> None:
        self._record("separator")

    def spacing(self) -> None:
        self._record("spacing")

    def text(self, s: str) -> None:
        self._record("text", s)

    def text_disabled(self, s: str) -> None:
        self._record("text_disabled", s)

    def text_colored(self, s: str, *rgba: float) -> None:
        self._record("text_colored", s, *rgba)

    def begin_child(self, label: str, *args: Any, **kwargs: Any) -> bool:
        self._record("begin_child", label)
        return True

    def end_child(self) -> None:
        self._record("end_child")

    def get_text_line_height(self) -> float:
        return 10.0

    # --- ウィジェット ---
    def button(self, label: str, *args: Any) -> bool:
        self._record("button", label)
        return label in self.clicked

    def selectable(self, label: str, selected: bool = False) -> tuple[bool, bool]:
        self._record("selectable", label, selected)
        hit = label in self.selected
        return hit, selected or hit

    def checkbox(self, label: str, state: bool) -> tuple[bool, bool]:
        self._record("checkbox", label, state)
        return self.responses.get("checkbox", (False, state))

    def input_text(self, label: str, value: str, *args: Any) -> tuple[bool, str]:
        self._record("input_text", label, value)
        return self.responses.get("input_text", (False, value))

    def input_text_with_hint(self, label: str, hint: str, value: str, *args: Any) -> tuple[bool, str]:
        self._record("input_text_with_hint", label, hint, value)
        return self.responses.get("input_text", (False, value))

    def input_text_multiline(self, label: str, value: str, *args: Any) -> tuple[bool, str]:
        self._record("input_text_multiline", label, value)
        return self.responses.get("input_text_multiline", (False, value))

    def slider_int(self, label: str, value: int, lo: int, hi: int, *args: Any) -> tuple[bool, int]:
        self._record("slider_int", label, value, lo, hi)
        return self.responses.get("slider_int", (False, value))

    def input_int(self, label: str, value: int, step: int, step_fast: int) -> tuple[bool, int]:
        self._record("input_int", label, value, step, step_fast)
        return self.responses.get("input_int", (False, value))

    def slider_float(self, label: str, value: float, lo: float, hi: float, **kwargs: Any) -> tuple[bool, float]:
        self._record("slider_float", label, value, lo, hi, kwargs.get("format"))
        return self.responses.get("slider_float", (False, value))

    def v_slider_float(self, label: str, w: float, h: float, value: float, lo: float, hi: float, fmt: str):
        self._record("v_slider_float", label, w, h, value, lo, hi, fmt)
        return self.responses.get("v_slider_float", (False, value))

    def slider_angle(self, label: str, value: float, lo_deg: float, hi_deg: float) -> tuple[bool, float]:
        self._record("slider_angle", label, value, lo_deg, hi_deg)
        return self.responses.get("slider_angle", (False, value))

    def color_edit4(self, label: str, r: float, g: float, b: float, a: float, **kwargs: Any):
        self._record("color_edit4", label, r, g, b, a)
        return self.responses.get("color_edit4", (False, (r, g, b, a)))

    def color_edit3(self, label: str, r: float, g: float, b: float, **kwargs: Any):
        self._record("color_edit3", label, r, g, b)
        return self.responses.get("color_edit3", (False, (r, g, b)))

    def combo(self, label: str, current: int, items: list[str]) -> tuple[bool, int]:
        self._record("combo", label, current, list(items))
        return self.responses.get("combo", (False, current))

    def image(self, texture_id: int, w: float, h: float) -> None:
        self._record("image", texture_id, w, h)


@pytest.fixture
def fake_imgui(monkeypatch: pytest.MonkeyPatch) -> FakeImgui:
    module = FakeImgui()
    monkeypatch.setitem(sys.modules, "imgui", module)
    return module
