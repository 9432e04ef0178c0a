# どこで: `src/vigil/core/properties/store.py`。
# 何を: ValueStore（key -> 現在値と dirty フラグ）を定義する。
# なぜ: 値の変更経路を `set_value` の 1 本に固定し、通知と保存予約を取りこぼさないため。

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .dispatch import ChangeDispatcher
from .registry import PropertyRegistry
from .types import is_stateless
from .values import initial_value


class ValueStore:
    """登録済み property の現在値を保持する。

    Notes
    -----
    - 値は `initialize()` で作られ、以後は `set_value()` 経由でのみ変わる。
    - 値が等しい（==）場合の `set_value()` は何もしない（通知も dirty 化もしない）。
    """

    def __init__(self, registry: PropertyRegistry, dispatcher: ChangeDispatcher) -> None:
        self._registry = registry
        self._dispatcher = dispatcher
        self._values: dict[str, Any] = {}
        self._dirty = False
        self._initialized = False

    @property
    def dirty(self) -> bool:
        """未保存の変更があれば True。"""

        return self._dirty

    @property
    def initialized(self) -> bool:
        return self._initialized

    def mark_clean(self) -> None:
        """保存成功後に dirty を下ろす。"""

        self._dirty = False

    def initialize(self, loaded: Mapping[str, Any]) -> None:
        """ロード値と既定値をマージして現在値を作り、初回通知を行う。

        Notes
        -----
        - 現在値は `loaded[key]`、無ければ既定値。
        - `trigger_on_init` が True の（button 以外の）property は、既定値と同じでも通知する。
        - 初期化そのものは dirty にしない。
        """

        if self._initialized:
            raise RuntimeError("ValueStore は初期化済みです")
        for descriptor in self._registry.properties():
            key = descriptor.key
            if is_stateless(descriptor.kind):
                continue
            self._values[key] = loaded[key] if key in loaded else initial_value(descriptor)
        self._initialized = True

        for descriptor in self._registry.properties():
            if descriptor.trigger_on_init and not is_stateless(descriptor.kind):
                self._dispatcher.notify(descriptor.key, self._values[descriptor.key])

    def get(self, key: str) -> Any | None:
        """現在値を返す。未登録・未初期化なら None。"""

        return self._values.get(key)

    def set_value(self, key: str, new_value: Any) -> bool:
        """現在値を更新し、変化した場合は True を返す。

        Raises
        ------
        KeyError
            未登録の key の場合。
        ValueError
            値を持たない property（button）の場合。
        """

        descriptor = self._registry.require(key)
        if is_stateless(descriptor.kind):
            raise ValueError(f"button は値を持ちません: key={key}")
        if key in self._values and self._values[key] == new_value:
            return False
        self._values[key] = new_value
        self._dirty = True
        self._dispatcher.notify(key, new_value)
        return True

    def reset_to_defaults(self) -> list[str]:
        """button 以外の全 property を既定値へ戻し、実際に変化した key を返す。"""

        changed: list[str] = []
        for descriptor in self._registry.properties():
            if is_stateless(descriptor.kind):
                continue
            if self.set_value(descriptor.key, initial_value(descriptor)):
                changed.append(descriptor.key)
        return changed

    def snapshot(self) -> dict[str, Any]:
        """現在値のコピーを返す。"""

        return dict(self._values)

    def clear(self) -> None:
        self._values.clear()
        self._dirty = False
        self._initialized = False


__all__ = ["ValueStore"]
