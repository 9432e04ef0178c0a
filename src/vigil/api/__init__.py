# どこで: `src/vigil/api/__init__.py`。
# 何を: 公開 API パッケージのエントリポイントとして Config と run_settings_window を再エクスポートする。
# なぜ: ユーザーコードからシンプルに API を import できるようにするため。

from __future__ import annotations

from .config import Config

__all__ = ["Config", "run_settings_window"]


def run_settings_window(*args, **kwargs):
    """公開 run API へのラッパ（遅延インポートで GUI 依存を後回しにする）。"""

    from vigil.interactive.runtime.host_loop import run_settings_window as _run

    return _run(*args, **kwargs)
