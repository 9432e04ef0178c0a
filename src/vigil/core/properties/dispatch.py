# どこで: `src/vigil/core/properties/dispatch.py`。
# 何を: key ごとの変更リスナー呼び出しと、button/inline action の実行を例外隔離つきで提供する。
# なぜ: 利用側コールバックの失敗が値の更新や他のリスナーへ波及しないようにするため。

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

_logger = logging.getLogger(__name__)

Listener = Callable[[Any], Any]


class ChangeDispatcher:
    """key -> リスナー列（登録順）を保持し、値の変更を通知する。"""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def subscribe(self, key: str, listener: Listener) -> None:
        """key のリスナーを末尾に追加する。"""

        if not callable(listener):
            raise TypeError(f"listener は callable である必要があります: key={key}")
        self._listeners.setdefault(key, []).append(listener)

    def has_listeners(self, key: str) -> bool:
        return bool(self._listeners.get(key))

    def notify(self, key: str, new_value: Any) -> int:
        """key のリスナーへ new_value を渡して呼び、失敗したリスナー数を返す。

        Notes
        -----
        リスナーの例外はログに残して握りつぶす。残りのリスナーは呼ばれ続ける。
        """

        failures = 0
        for listener in list(self._listeners.get(key, ())):
            try:
                listener(new_value)
            except Exception:
                failures += 1
                _logger.exception("リスナーでエラーが発生しました: key=%s", key)
        return failures

    def clear(self) -> None:
        self._listeners.clear()


def run_action(key: str, action: Callable[[], Any] | None, *, label: str = "action") -> bool:
    """button / inline action を実行し、成功したら True を返す。

    action が None の場合は何もせず True を返す。例外はログに残して False を返す。
    """

    if action is None:
        return True
    try:
        action()
    except Exception:
        _logger.exception("%s でエラーが発生しました: key=%s", label, key)
        return False
    return True


__all__ = ["ChangeDispatcher", "Listener", "run_action"]
