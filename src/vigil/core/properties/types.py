# どこで: `src/vigil/core/properties/types.py`。
# 何を: プロパティ種別（PropertyType）と値ファミリ（ValueFamily）の対応表を定義する。
# なぜ: codec/正規化/ウィジェット選択が同じ種別表を網羅的に参照できるようにするため。

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class PropertyType(str, Enum):
    """登録可能なプロパティ種別。"""

    SWITCH = "switch"
    CHECKBOX = "checkbox"
    TEXT = "text"
    PARAGRAPH = "paragraph"
    INT_SLIDER = "int_slider"
    DECIMAL_SLIDER = "decimal_slider"
    PERCENT_SLIDER = "percent_slider"
    VERTICAL_SLIDER = "vertical_slider"
    ANGLE_SLIDER = "angle_slider"
    INT_NUMBER = "int_number"
    COLOR = "color"
    SELECTOR = "selector"
    BUTTON = "button"
    IMAGE_REFERENCE = "image_reference"

    @classmethod
    def parse(cls, value: object) -> "PropertyType":
        """文字列（`int-slider` 等のハイフン表記を含む）から PropertyType を返す。

        Raises
        ------
        ValueError
            未知の種別名の場合。
        """

        if isinstance(value, PropertyType):
            return value
        text = str(value).strip().lower().replace("-", "_")
        return cls(text)


class ValueFamily(str, Enum):
    """現在値セルのタグ（保持する Python 型の系統）。"""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    COLOR = "color"
    INDEX = "index"  # selector の 1-based index
    NONE = "none"  # button（値を持たない）


class Color(NamedTuple):
    """ARGB（各 0..255）の色。"""

    a: int
    r: int
    g: int
    b: int


_FAMILY_BY_TYPE: dict[PropertyType, ValueFamily] = {
    PropertyType.SWITCH: ValueFamily.BOOL,
    PropertyType.CHECKBOX: ValueFamily.BOOL,
    PropertyType.TEXT: ValueFamily.STRING,
    PropertyType.PARAGRAPH: ValueFamily.STRING,
    PropertyType.INT_SLIDER: ValueFamily.INT,
    PropertyType.DECIMAL_SLIDER: ValueFamily.FLOAT,
    PropertyType.PERCENT_SLIDER: ValueFamily.FLOAT,
    PropertyType.VERTICAL_SLIDER: ValueFamily.FLOAT,
    PropertyType.ANGLE_SLIDER: ValueFamily.FLOAT,
    PropertyType.INT_NUMBER: ValueFamily.INT,
    PropertyType.COLOR: ValueFamily.COLOR,
    PropertyType.SELECTOR: ValueFamily.INDEX,
    PropertyType.BUTTON: ValueFamily.NONE,
    # image_reference の現在値は画像パス文字列。
    PropertyType.IMAGE_REFERENCE: ValueFamily.STRING,
}

# 種別を追加したら対応表の更新を強制する。
_missing = set(PropertyType) - set(_FAMILY_BY_TYPE)
if _missing:  # pragma: no cover
    raise RuntimeError(f"ValueFamily が未定義の種別があります: {sorted(t.value for t in _missing)}")


def value_family(kind: PropertyType) -> ValueFamily:
    """kind に対応する ValueFamily を返す。"""

    return _FAMILY_BY_TYPE[kind]


def is_stateless(kind: PropertyType) -> bool:
    """値を保持しない種別（button）なら True を返す。"""

    return kind is PropertyType.BUTTON


__all__ = ["Color", "PropertyType", "ValueFamily", "is_stateless", "value_family"]
