# どこで: `src/vigil/core/properties/values.py`。
# 何を: 現在値セルの正規化（型変換とレンジ clamp）と、種別ごとの既定値を提供する。
# なぜ: UI 入力・永続化ファイル・API 呼び出しの 3 経路で値の形を 1 箇所に揃えるため。

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from .descriptor import PropertyDescriptor
from .types import Color, PropertyType, ValueFamily, value_family

_TRUE_TEXTS = {"true", "1", "on", "yes"}
_FALSE_TEXTS = {"false", "0", "off", "no"}


def round_half_up(value: float) -> int:
    """四捨五入（0.5 は +∞ 方向）した int を返す。"""

    return int(math.floor(float(value) + 0.5))


def _clamp(value: Any, lo: Any, hi: Any) -> Any:
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def float_range(descriptor: PropertyDescriptor) -> tuple[float, float]:
    """実数系プロパティの値レンジ (min, max) を返す。

    angle_slider はラジアン、percent_slider は 0..1 で返す。
    """

    kind = descriptor.kind
    if kind is PropertyType.PERCENT_SLIDER:
        return 0.0, 1.0
    if kind is PropertyType.ANGLE_SLIDER:
        return math.radians(float(descriptor.min_deg)), math.radians(float(descriptor.max_deg))
    return float(descriptor.min_f), float(descriptor.max_f)


def default_for_kind(kind: PropertyType, fields: dict[str, Any]) -> Any:
    """default 省略時の既定値を返す。

    Parameters
    ----------
    kind : PropertyType
        プロパティ種別。
    fields : dict[str, Any]
        既定値を埋めた後の descriptor フィールド（min / min_f 等を参照する）。
    """

    if kind in (PropertyType.SWITCH, PropertyType.CHECKBOX):
        return False
    if kind in (PropertyType.TEXT, PropertyType.PARAGRAPH):
        return ""
    if kind in (PropertyType.INT_SLIDER, PropertyType.INT_NUMBER):
        return int(fields["min"])
    if kind in (PropertyType.DECIMAL_SLIDER, PropertyType.VERTICAL_SLIDER):
        return float(fields["min_f"])
    if kind is PropertyType.PERCENT_SLIDER:
        return 0.0
    if kind is PropertyType.ANGLE_SLIDER:
        # 0 度がレンジ外なら最寄りの端に寄せる。
        deg = min(max(0.0, float(fields["min_deg"])), float(fields["max_deg"]))
        return math.radians(deg)
    if kind is PropertyType.COLOR:
        return Color(255, 255, 255, 255)
    if kind is PropertyType.SELECTOR:
        return 1
    # button / image_reference は default を持たない。
    return None


def initial_value(descriptor: PropertyDescriptor) -> Any:
    """ロード値が無いときの現在値（= reset 先）を返す。

    image_reference は default を持たないため、画像パスを現在値とする。
    """

    if descriptor.kind is PropertyType.IMAGE_REFERENCE:
        return descriptor.default if descriptor.default is not None else descriptor.path
    return descriptor.default


def _as_color(value: Any) -> Color | None:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return None
    if len(value) != 4:
        return None
    out: list[int] = []
    for channel in value:
        if isinstance(channel, bool):
            return None
        try:
            iv = round_half_up(float(channel))
        except (TypeError, ValueError, OverflowError):
            return None
        out.append(int(_clamp(iv, 0, 255)))
    return Color(out[0], out[1], out[2], out[3])


def normalize_value(value: Any, descriptor: PropertyDescriptor) -> tuple[Any | None, str | None]:
    """descriptor.kind に従って値を正規化し、(正規化値, エラー種別) を返す。

    Notes
    -----
    - 数値は descriptor のレンジへ clamp する（エラーにはしない）。
    - 変換できない場合は `(None, "<理由>")` を返す。
    - button は常に `(None, None)`。
    """

    family = value_family(descriptor.kind)

    if family is ValueFamily.NONE:
        return None, None

    if family is ValueFamily.BOOL:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_TEXTS:
                return True, None
            if lowered in _FALSE_TEXTS:
                return False, None
            return None, "invalid_bool"
        return bool(value), None

    if family is ValueFamily.STRING:
        if value is None:
            if descriptor.kind is PropertyType.IMAGE_REFERENCE:
                return None, None
            return "", None
        if isinstance(value, bytes):
            try:
                return value.decode("utf-8"), None
            except UnicodeDecodeError:
                return None, "invalid_string"
        return str(value), None

    if family is ValueFamily.COLOR:
        color = _as_color(value)
        if color is None:
            return None, "invalid_color"
        return color, None

    if value is None or isinstance(value, bool):
        return None, f"invalid_{family.value}"

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None, f"invalid_{family.value}"
    if not math.isfinite(number):
        return None, f"invalid_{family.value}"

    if family is ValueFamily.INT:
        iv = round_half_up(number)
        return int(_clamp(iv, int(descriptor.min), int(descriptor.max))), None

    if family is ValueFamily.INDEX:
        index = max(1, round_half_up(number))
        if descriptor.options:
            index = min(index, len(descriptor.options))
        return int(index), None

    lo, hi = float_range(descriptor)
    return float(_clamp(number, lo, hi)), None


__all__ = [
    "default_for_kind",
    "float_range",
    "initial_value",
    "normalize_value",
    "round_half_up",
]
