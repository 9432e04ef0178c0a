# どこで: `src/vigil/interactive/settings_gui/widgets.py`。
# 何を: PropertyDescriptor.kind を pyimgui の値ウィジェットへ対応付けて描画する。
# なぜ: kind ごとの UI 実装を閉じ込め、パネルのレイアウトから分離するため。

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from vigil.core.properties import Color, PropertyDescriptor, PropertyType
from vigil.core.properties.values import float_range

WidgetFn = Callable[[PropertyDescriptor, Any], tuple[bool, Any]]


class AssetLoader(Protocol):
    """画像パスを ImGui 用テクスチャへ解決する外部コラボレータ。"""

    def texture(self, path: str) -> tuple[int, int, int] | None:
        """(texture_id, width, height) を返す。未ロード/失敗なら None。"""
        ...


def _label(descriptor: PropertyDescriptor, prefix: str, *, visible: bool = True) -> str:
    shown = descriptor.name if visible else ""
    return f"{shown}##{prefix}_{descriptor.key}"


def _clamp(value: Any, lo: Any, hi: Any) -> Any:
    return max(lo, min(hi, value))


def mask_text(text: str) -> str:
    """protected text の表示用マスク文字列を返す。"""

    return "•" * len(text) if text else "(empty)"


def widget_switch(descriptor: PropertyDescriptor, value: Any) -> tuple[bool, bool]:
    """switch（ラベル右側のチェックボックス）を描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    clicked, state = imgui.checkbox(_label(descriptor, "sw", visible=False), bool(value))
    imgui.same_line()
    imgui.text(descriptor.name)
    return clicked, bool(state)


def widget_checkbox(descriptor: PropertyDescriptor, value: Any) -> tuple[bool, bool]:
    """checkbox を描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    clicked, state = imgui.checkbox(_label(descriptor, "cb"), bool(value))
    return clicked, bool(state)


def _input_text(label: str, value: str, hint: str) -> tuple[bool, str]:
    import imgui  # type: ignore[import-untyped]

    with_hint = getattr(imgui, "input_text_with_hint", None)
    if hint and callable(with_hint):
        return with_hint(label, hint, value)
    return imgui.input_text(label, value)


def widget_text(
    descriptor: PropertyDescriptor,
    value: Any,
    *,
    revealed_keys: set[str] | None = None,
) -> tuple[bool, str]:
    """1 行テキスト入力を描画し、(changed, value) を返す。

    Notes
    -----
    protected の場合は Show/Hide ボタンを前置し、Hide 中は編集せずマスク表示だけ行う。
    平文表示中の key は呼び出し側の `revealed_keys` に保持する（None なら常に Hide）。
    """

    import imgui  # type: ignore[import-untyped]

    key = descriptor.key
    current = "" if value is None else str(value)
    if not descriptor.protected:
        return _input_text(_label(descriptor, "txt"), current, descriptor.placeholder)

    revealed = revealed_keys is not None and key in revealed_keys
    if imgui.button(("Hide" if revealed else "Show") + f"##btn_{key}") and revealed_keys is not None:
        revealed = not revealed
        if revealed:
            revealed_keys.add(key)
        else:
            revealed_keys.discard(key)
    imgui.same_line()

    if revealed:
        return _input_text(_label(descriptor, "txt"), current, descriptor.placeholder)
    imgui.text(f"{descriptor.name}: {mask_text(current)}")
    return False, current


def widget_paragraph(descriptor: PropertyDescriptor, value: Any) -> tuple[bool, str]:
    """複数行テキスト入力を描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    current = "" if value is None else str(value)
    imgui.text(f"{descriptor.name}:")
    line_count = int(current.count("\n")) + 1
    visible_lines = max(3, min(8, line_count))
    height = float(imgui.get_text_line_height()) * float(visible_lines) + 8.0
    return imgui.input_text_multiline(_label(descriptor, "para", visible=False), current, -1, -1.0, height)


def widget_int_slider(descriptor: PropertyDescriptor, value: Any) -> tuple[bool, int]:
    """int_slider を描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    lo, hi = int(descriptor.min), int(descriptor.max)
    current = lo if value is None else int(value)
    changed, out = imgui.slider_int(_label(descriptor, "sl"), current, lo, hi)
    return changed, int(_clamp(int(out), lo, hi))


def widget_int_number(descriptor: PropertyDescriptor, value: Any) -> tuple[bool, int]:
    """int_number（増減ボタン付き整数入力）を描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    lo, hi = int(descriptor.min), int(descriptor.max)
    step = int(descriptor.increment)
    current = lo if value is None else int(value)
    changed, out = imgui.input_int(_label(descriptor, "num"), current, step, step * 5)
    return changed, int(_clamp(int(out), lo, hi))


def widget_decimal_slider(descriptor: PropertyDescriptor, value: Any) -> tuple[bool, float]:
    """decimal_slider を描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    lo, hi = float_range(descriptor)
    current = lo if value is None else float(value)
    fmt = f"%.{int(descriptor.decimal_places)}f"
    changed, out = imgui.slider_float(_label(descriptor, "dsl"), current, lo, hi, format=fmt)
    return changed, float(_clamp(float(out), lo, hi))


def widget_percent_slider(descriptor: PropertyDescriptor, value: Any) -> tuple[bool, float]:
    """percent_slider（表示 0..100%、値 0..1）を描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    current = 0.0 if value is None else float(value)
    changed, pct = imgui.slider_float(
        _label(descriptor, "psl"), current * 100.0, 0.0, 100.0, format="%.1f%%"
    )
    return changed, float(_clamp(float(pct), 0.0, 100.0)) / 100.0


def widget_vertical_slider(descriptor: PropertyDescriptor, value: Any) -> tuple[bool, float]:
    """vertical_slider を描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    lo, hi = float_range(descriptor)
    current = lo if value is None else float(value)
    fmt = f"%.{int(descriptor.decimal_places)}f"
    changed, out = imgui.v_slider_float(
        _label(descriptor, "vsl", visible=False),
        float(descriptor.width),
        float(descriptor.height),
        current,
        lo,
        hi,
        fmt,
    )
    imgui.same_line()
    imgui.text(descriptor.name)
    return changed, float(_clamp(float(out), lo, hi))


def widget_angle_slider(descriptor: PropertyDescriptor, value: Any) -> tuple[bool, float]:
    """angle_slider（表示は度、値はラジアン）を描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    lo, hi = float_range(descriptor)
    current = 0.0 if value is None else float(value)
    changed, out = imgui.slider_angle(
        _label(descriptor, "asl"),
        current,
        float(descriptor.min_deg),
        float(descriptor.max_deg),
    )
    return changed, float(_clamp(float(out), lo, hi))


def _as_color(value: Any) -> Color:
    try:
        a, r, g, b = value  # type: ignore[misc]
    except Exception:
        return Color(255, 255, 255, 255)
    return Color(*(int(_clamp(int(c), 0, 255)) for c in (a, r, g, b)))


def _to255(x: float) -> int:
    return int(_clamp(int(round(float(x) * 255.0)), 0, 255))


def widget_color(descriptor: PropertyDescriptor, value: Any) -> tuple[bool, Color]:
    """color（値は ARGB 0..255）のカラーピッカーを描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    color = _as_color(value)
    label = _label(descriptor, "col")
    rf, gf, bf, af = color.r / 255.0, color.g / 255.0, color.b / 255.0, color.a / 255.0
    flags = imgui.COLOR_EDIT_UINT8 | imgui.COLOR_EDIT_DISPLAY_RGB | imgui.COLOR_EDIT_INPUT_RGB

    if descriptor.allow_alpha:
        changed, out = imgui.color_edit4(label, rf, gf, bf, af, flags=flags)
        if not changed:
            return False, color
        r2, g2, b2, a2 = out
        return True, Color(_to255(a2), _to255(r2), _to255(g2), _to255(b2))

    changed, out = imgui.color_edit3(label, rf, gf, bf, flags=flags)
    if not changed:
        return False, color
    r2, g2, b2 = out
    return True, Color(color.a, _to255(r2), _to255(g2), _to255(b2))


def widget_selector(descriptor: PropertyDescriptor, value: Any) -> tuple[bool, int]:
    """selector（値は 1-based index）のコンボを描画し、(changed, value) を返す。"""

    import imgui  # type: ignore[import-untyped]

    options = [str(x) for x in descriptor.options]
    current = 1 if value is None else int(value)
    if not options:
        imgui.text_disabled(f"{descriptor.name}: (no options)")
        return False, current
    current0 = int(_clamp(current - 1, 0, len(options) - 1))
    changed, new0 = imgui.combo(_label(descriptor, "sel"), current0, options)
    new1 = int(_clamp(int(new0), 0, len(options) - 1)) + 1
    return bool(changed and new1 != current), new1


def widget_button(descriptor: PropertyDescriptor, value: Any) -> tuple[bool, None]:
    """button を描画し、(clicked, None) を返す。"""

    import imgui  # type: ignore[import-untyped]

    return bool(imgui.button(_label(descriptor, "btn"))), None


def render_image(
    descriptor: PropertyDescriptor, value: Any, *, assets: AssetLoader | None
) -> tuple[bool, Any]:
    """image_reference を描画する（値は変えない）。"""

    import imgui  # type: ignore[import-untyped]

    path = "" if value is None else str(value)
    imgui.text(f"{descriptor.name}:")
    resolved = assets.texture(path) if (assets is not None and path) else None
    if resolved is None:
        imgui.text_disabled(path or "(no image)")
        return False, value

    texture_id, tex_w, tex_h = resolved
    width = float(descriptor.width or tex_w)
    height = float(descriptor.height or tex_h)
    imgui.image(texture_id, width, height)
    return False, value


_KIND_TO_WIDGET: dict[PropertyType, WidgetFn] = {
    PropertyType.SWITCH: widget_switch,
    PropertyType.CHECKBOX: widget_checkbox,
    PropertyType.TEXT: widget_text,
    PropertyType.PARAGRAPH: widget_paragraph,
    PropertyType.INT_SLIDER: widget_int_slider,
    PropertyType.DECIMAL_SLIDER: widget_decimal_slider,
    PropertyType.PERCENT_SLIDER: widget_percent_slider,
    PropertyType.VERTICAL_SLIDER: widget_vertical_slider,
    PropertyType.ANGLE_SLIDER: widget_angle_slider,
    PropertyType.INT_NUMBER: widget_int_number,
    PropertyType.COLOR: widget_color,
    PropertyType.SELECTOR: widget_selector,
    PropertyType.BUTTON: widget_button,
}


def render_value_widget(
    descriptor: PropertyDescriptor,
    value: Any,
    *,
    assets: AssetLoader | None = None,
    revealed_keys: set[str] | None = None,
) -> tuple[bool, Any]:
    """descriptor.kind に応じたウィジェットを描画し、(changed, value) を返す。

    Returns
    -------
    changed : bool
        値が変更された場合 True（button はクリックされた場合 True）。
    value : Any
        変更後の値（button は None）。
    """

    if descriptor.kind is PropertyType.IMAGE_REFERENCE:
        return render_image(descriptor, value, assets=assets)
    if descriptor.kind is PropertyType.TEXT:
        return widget_text(descriptor, value, revealed_keys=revealed_keys)
    fn = _KIND_TO_WIDGET[descriptor.kind]
    return fn(descriptor, value)


def widget_registry() -> dict[PropertyType, WidgetFn]:
    """kind→widget 関数マップのコピーを返す（image_reference を除く）。"""

    return dict(_KIND_TO_WIDGET)


__all__ = [
    "AssetLoader",
    "mask_text",
    "render_value_widget",
    "widget_registry",
]
