# どこで: `src/vigil/core/properties/descriptor.py`。
# 何を: PropertyDescriptor（1 設定項目の静的定義）と ValidationError を提供する。
# なぜ: 登録後に不変な定義と、変化する現在値（ValueStore）を分離するため。

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .types import PropertyType


class ValidationError(ValueError):
    """プロパティ定義（登録内容）が不正な場合の例外。"""


@dataclass(frozen=True, slots=True)
class InlineAction:
    """プロパティ行の右側に並べる補助ボタン。"""

    name: str
    action: Callable[[], Any]


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """1 つの設定項目の定義。

    Notes
    -----
    - 登録後は不変。`hidden` だけは `PropertyRegistry.hide()` が差し替える。
    - 範囲系の制約は kind に関係なく全フィールドを持ち、使わない値は既定のまま残る。
    - `subcategory == ""` は「サブカテゴリ無し」を意味する。
    """

    key: str
    kind: PropertyType
    name: str
    category: str
    subcategory: str = ""
    description: str = ""
    default: Any = None

    # 整数レンジ（int_slider / int_number）
    min: int = 0
    max: int = 100
    increment: int = 1

    # 実数レンジ（decimal_slider / vertical_slider）
    min_f: float = 0.0
    max_f: float = 1.0
    decimal_places: int = 2

    # 角度レンジ（angle_slider、UI は度・値はラジアン）
    min_deg: float = -180.0
    max_deg: float = 180.0

    options: tuple[str, ...] = ()
    allow_alpha: bool = True
    protected: bool = False
    placeholder: str = ""

    # vertical_slider / image_reference の表示サイズ
    width: int = 0
    height: int = 0
    path: str | None = None

    action: Callable[[], Any] | None = None
    inline_action: InlineAction | None = None

    hidden: bool = False
    trigger_on_init: bool = True


__all__ = ["InlineAction", "PropertyDescriptor", "ValidationError"]
