# どこで: `src/vigil/core/properties/codec.py`。
# 何を: 1 つの値と設定ファイル上のテキスト表現（`key = <ここ>`）を相互変換する。
# なぜ: 値の書式を種別ごとに 1 箇所へ閉じ込め、ファイル全体の読み書きから分離するため。

from __future__ import annotations

import math
import re
from typing import Any

from .types import Color, PropertyType, ValueFamily, value_family
from .values import round_half_up

FLOAT_DECIMALS = 6

_INT_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?\d+\.\d*$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_COLOR_RE = re.compile(r'^"?\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*"?$')

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}

# str.splitlines() が行区切りとみなす残りの文字。1 値が複数行に割れないよう \uXXXX で書く。
_LINE_BREAKS = frozenset("\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _escape_char(ch: str) -> str:
    if ch in _LINE_BREAKS:
        return f"\\u{ord(ch):04x}"
    return _ESCAPES.get(ch, ch)


def _quote(text: str) -> str:
    return '"' + "".join(_escape_char(ch) for ch in text) + '"'


def _unquote(text: str) -> str | None:
    """`"..."` 形式の文字列を復元して返す。形式が不正なら None。"""

    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        return None
    body = text[1:-1]
    out: list[str] = []
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch == "\\":
            if i + 1 >= n:
                return None
            nxt = body[i + 1]
            hex4 = body[i + 2 : i + 6]
            if nxt == "u" and len(hex4) == 4 and set(hex4) <= _HEX_DIGITS:
                out.append(chr(int(hex4, 16)))
                i += 6
                continue
            # 未知のエスケープは文字通り残す（手編集ファイルへの許容）。
            out.append(_UNESCAPES.get(nxt, "\\" + nxt))
            i += 2
            continue
        if ch == '"':
            return None
        out.append(ch)
        i += 1
    return "".join(out)


def encode_value(value: Any, kind: PropertyType) -> str:
    """value を kind の書式でテキストへ変換して返す。

    Raises
    ------
    ValueError
        値を持たない種別（button）や、None を渡した場合。
    """

    family = value_family(kind)
    if family is ValueFamily.NONE or value is None:
        raise ValueError(f"encode できない値です: kind={kind.value} value={value!r}")

    if family is ValueFamily.BOOL:
        return "true" if bool(value) else "false"

    if family is ValueFamily.COLOR:
        a, r, g, b = (max(0, min(255, int(c))) for c in value)
        return f'"{a},{r},{g},{b}"'

    if family is ValueFamily.FLOAT:
        return f"{float(value):.{FLOAT_DECIMALS}f}"

    if family in (ValueFamily.INT, ValueFamily.INDEX):
        return str(round_half_up(value))

    return _quote(str(value))


def decode_value(text: str, kind: PropertyType | None) -> Any | None:
    """テキストを kind の値へ変換して返す。解釈できなければ None（= 既定値を使う）。

    Notes
    -----
    例外は送出しない。1 値の失敗がファイル全体の読み込みを止めないようにするため。
    """

    if kind is None:
        return None
    s = str(text).strip()
    family = value_family(kind)

    if family is ValueFamily.NONE:
        return None

    if family is ValueFamily.BOOL:
        if s == "true":
            return True
        if s == "false":
            return False
        return None

    if family is ValueFamily.COLOR:
        m = _COLOR_RE.match(s)
        if m is None:
            return None
        try:
            channels = tuple(int(x) for x in m.groups())
        except ValueError:
            return None
        if any(c > 255 for c in channels):
            return None
        return Color(*channels)

    if family in (ValueFamily.INT, ValueFamily.INDEX):
        try:
            if _INT_RE.match(s):
                return int(s)
            if _DECIMAL_RE.match(s):
                return round_half_up(float(s))
        except (ValueError, OverflowError):
            # 桁数上限超え / float 化で inf になる巨大値。
            return None
        return None

    if family is ValueFamily.FLOAT:
        if not _FLOAT_RE.match(s):
            return None
        number = float(s)
        return number if math.isfinite(number) else None

    return _unquote(s)


__all__ = ["FLOAT_DECIMALS", "decode_value", "encode_value"]
