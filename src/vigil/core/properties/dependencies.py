# どこで: `src/vigil/core/properties/dependencies.py`。
# 何を: 「依存先の現在値が真のときだけ表示する」という 1 段の可視性ルールを提供する。
# なぜ: 表示可否の判定を描画から切り離し、単体テスト可能に保つため。

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .descriptor import PropertyDescriptor, ValidationError


def is_enabled_value(value: Any) -> bool:
    """依存先の値が「有効」扱いなら True を返す。

    Notes
    -----
    False と None（未設定）だけを無効とみなす。0 や "" は有効扱い。
    """

    return value is not False and value is not None


class DependencyGraph:
    """dependent key -> prerequisite key の 1 段マップ。

    依存は 1 段のみ評価する（依存先の、さらに依存先は見ない）。
    同じ dependent に再登録した場合は後勝ち。
    """

    def __init__(self) -> None:
        self._prerequisite_by_key: dict[str, str] = {}

    def add(self, dependent_key: str, prerequisite_key: str) -> None:
        """依存辺を追加する。

        Raises
        ------
        ValidationError
            自己依存の場合。
        """

        if dependent_key == prerequisite_key:
            raise ValidationError(f"自己依存は登録できません: key={dependent_key}")
        self._prerequisite_by_key[str(dependent_key)] = str(prerequisite_key)

    def prerequisite(self, key: str) -> str | None:
        """key の依存先を返す。無ければ None。"""

        return self._prerequisite_by_key.get(key)

    def edges(self) -> dict[str, str]:
        """dependent -> prerequisite のコピーを返す。"""

        return dict(self._prerequisite_by_key)

    def is_visible(self, descriptor: PropertyDescriptor, values: Mapping[str, Any]) -> bool:
        """descriptor を表示してよいなら True を返す。"""

        if descriptor.hidden:
            return False
        prerequisite = self._prerequisite_by_key.get(descriptor.key)
        if prerequisite is None:
            return True
        return is_enabled_value(values.get(prerequisite))


__all__ = ["DependencyGraph", "is_enabled_value"]
