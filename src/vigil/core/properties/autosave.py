# どこで: `src/vigil/core/properties/autosave.py`。
# 何を: dirty フラグを外部 tick ごとに確認し、必要なときだけ保存する AutosaveScheduler を提供する。
# なぜ: 1 tick 内の連続した変更を 1 回のディスク書き込みへまとめるため。

from __future__ import annotations

from collections.abc import Callable

from .store import ValueStore


class AutosaveScheduler:
    """外部 tick 駆動の保存スケジューラ。

    Notes
    -----
    `save` は成功時 True を返す関数。False の場合は dirty を残し、次の tick で再試行する。
    """

    def __init__(self, store: ValueStore, save: Callable[[], bool]) -> None:
        self._store = store
        self._save = save
        self._flush_count = 0

    @property
    def flush_count(self) -> int:
        """成功した保存の回数を返す。"""

        return int(self._flush_count)

    def tick(self) -> bool:
        """dirty なら保存し、この tick で保存に成功したら True を返す。"""

        if not self._store.dirty:
            return False
        if not self._save():
            return False
        self._store.mark_clean()
        self._flush_count += 1
        return True


__all__ = ["AutosaveScheduler"]
