# どこで: `src/vigil/interactive/settings_gui/panel.py`。
# 何を: Config をカテゴリ一覧 + プロパティ一覧のパネルとして描画し、ウィジェットの結果を Config へ反映する。
# なぜ: 「描画」と「値の更新」を分離し、反映規則（button/inline action/正規化失敗）を単体テスト可能に保つため。

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from vigil.api.config import Config
from vigil.core.properties import Color, PropertyDescriptor, PropertyType

from .widgets import AssetLoader, render_value_widget

_logger = logging.getLogger(__name__)

SIDEBAR_WIDTH = 130

RenderFn = Callable[..., tuple[bool, Any]]


@dataclass(slots=True)
class PanelState:
    """フレームを跨いで保持するパネルの UI 状態。"""

    active_category: str | None = None
    revealed_keys: set[str] = field(default_factory=set)


def visible_sections(config: Config, category: str) -> list[tuple[str, list[PropertyDescriptor]]]:
    """category 内の (subcategory, 表示可能な descriptor 列) を初出順で返す。

    表示可能な descriptor が 1 つも無い subcategory は含めない。
    """

    out: list[tuple[str, list[PropertyDescriptor]]] = []
    for sub in config.subcategories(category):
        rows = [d for d in config.section(category, sub) if config.is_visible(d)]
        if rows:
            out.append((sub, rows))
    return out


def resolve_active_category(config: Config, state: PanelState) -> str | None:
    """表示中の category を返す（未選択・消失時は先頭へ寄せる）。"""

    categories = config.categories()
    if not categories:
        state.active_category = None
        return None
    if state.active_category not in categories:
        state.active_category = categories[0]
    return state.active_category


def apply_widget_result(
    config: Config,
    descriptor: PropertyDescriptor,
    changed: bool,
    value: Any,
) -> bool:
    """ウィジェットの (changed, value) を Config へ反映し、反映したら True を返す。

    Notes
    -----
    - button は changed（クリック）で action を実行する。
    - 正規化できない値は警告ログを残して捨てる（GUI を止めない）。
    """

    if not changed:
        return False
    if descriptor.kind is PropertyType.BUTTON:
        config.trigger_action(descriptor.key)
        return True
    if descriptor.kind is PropertyType.IMAGE_REFERENCE:
        return False
    try:
        return config.set(descriptor.key, value)
    except ValueError as exc:
        _logger.warning("GUI 入力を反映できませんでした: key=%s err=%s", descriptor.key, exc)
        return False


def theme_rgb(config: Config) -> tuple[float, float, float] | None:
    """最初の color property の RGB（0..1）を返す。無ければ None。"""

    for descriptor in config.properties():
        if descriptor.kind is not PropertyType.COLOR:
            continue
        value = config.get(descriptor.key)
        if value is None:
            return None
        color = Color(*value)
        return color.r / 255.0, color.g / 255.0, color.b / 255.0
    return None


def render_property(
    imgui: Any,
    config: Config,
    descriptor: PropertyDescriptor,
    *,
    assets: AssetLoader | None = None,
    revealed_keys: set[str] | None = None,
    render_widget: RenderFn = render_value_widget,
) -> bool:
    """1 property 分（ウィジェット / inline action / 説明）を描画し、値を反映したら True を返す。"""

    changed, value = render_widget(
        descriptor, config.get(descriptor.key), assets=assets, revealed_keys=revealed_keys
    )
    applied = apply_widget_result(config, descriptor, changed, value)

    inline = descriptor.inline_action
    if inline is not None:
        imgui.same_line()
        if imgui.button(f"{inline.name}##inline_{descriptor.key}"):
            config.trigger_inline_action(descriptor.key)

    if descriptor.description:
        imgui.text_disabled(f"  {descriptor.description}")
    return applied


def render_settings_panel(
    imgui: Any,
    config: Config,
    state: PanelState,
    *,
    assets: AssetLoader | None = None,
) -> bool:
    """カテゴリ一覧（左）とプロパティ一覧（右）を描画し、値が変わったら True を返す。"""

    imgui.text(f"{config.open_key} to close   |   {config.title}")
    imgui.separator()

    active = resolve_active_category(config, state)

    imgui.begin_child("##cats", SIDEBAR_WIDTH, 0, border=True)
    try:
        for category in config.categories():
            clicked, _selected = imgui.selectable(f"{category}##cat_{category}", category == active)
            if clicked:
                state.active_category = category
        imgui.spacing()
        imgui.separator()
        imgui.spacing()
        if imgui.button("Reset All##global_reset", -1):
            config.reset_to_defaults()
    finally:
        imgui.end_child()

    imgui.same_line()

    changed_any = False
    imgui.begin_child("##props", 0, 0, border=False)
    try:
        if state.active_category is not None:
            for sub, rows in visible_sections(config, state.active_category):
                if sub:
                    imgui.text_disabled(f"-- {sub} --")
                    imgui.separator()
                for descriptor in rows:
                    try:
                        applied = render_property(
                            imgui, config, descriptor, assets=assets, revealed_keys=state.revealed_keys
                        )
                    except Exception as exc:
                        # 1 行の描画失敗でパネル全体を止めない。
                        _logger.exception("property の描画に失敗しました: key=%s", descriptor.key)
                        imgui.text_colored(f"{descriptor.name}: {exc}", 1.0, 0.35, 0.35, 1.0)
                        continue
                    changed_any = applied or changed_any
                imgui.spacing()
    finally:
        imgui.end_child()
    return changed_any


__all__ = [
    "PanelState",
    "apply_widget_result",
    "render_property",
    "render_settings_panel",
    "resolve_active_category",
    "theme_rgb",
    "visible_sections",
]
